from ..errors import ErrorKind, Outcome, failure, success
from .keys import KeyRegistry, is_contained, is_valid_key, sanitize_key


def resolve(registry: KeyRegistry, raw_key: str | None) -> Outcome[str]:
    """Resolve a client-supplied key to its registered destination.

    Malformed and unknown keys fail identically so the response cannot be used
    to probe which keys exist.
    """
    key = sanitize_key(raw_key)
    if not is_valid_key(key) or key != raw_key:
        return failure(ErrorKind.INVALID_KEY, f"malformed key {raw_key!r}")

    destination = registry.get(key)
    if destination is None:
        return failure(ErrorKind.INVALID_KEY, f"unknown key {key!r}")

    if not is_contained(destination, registry.allowed_root):
        return failure(ErrorKind.INVALID_PATH, f"{destination} escapes {registry.allowed_root}")

    return success(destination)
