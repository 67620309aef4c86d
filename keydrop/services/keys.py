"""Key syntax rules and the startup-time key -> destination registry."""

import logging
import os
import re
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from ..config import KEY_PREFIX, Settings
from ..errors import ConfigError

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"[A-Za-z0-9_-]+")
_NOT_KEY_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def is_valid_key(candidate: str | None) -> bool:
    return isinstance(candidate, str) and _KEY_RE.fullmatch(candidate) is not None


def sanitize_key(raw: str | None) -> str:
    return _NOT_KEY_CHARS.sub("", raw or "")


def canonical(path: str | os.PathLike) -> str:
    return str(Path(path).resolve())


def is_contained(path: str | os.PathLike, root: str | os.PathLike) -> bool:
    """True if ``path`` is ``root`` or lies below it, after canonicalization."""
    target, base = canonical(path), canonical(root)
    if target == base:
        return True
    return target.startswith(base.rstrip(os.sep) + os.sep)


class KeyRegistry:
    """Read-only mapping of key -> absolute destination path.

    Built once by :meth:`load`; a single bad entry refuses the whole
    configuration.
    """

    def __init__(self, allowed_root: str, entries: Mapping[str, str]):
        self._allowed_root = allowed_root
        self._entries = MappingProxyType(dict(entries))

    @property
    def allowed_root(self) -> str:
        return self._allowed_root

    @classmethod
    def load(cls, settings: Settings) -> "KeyRegistry":
        root = settings.allowed_upload_dir
        if not root or not os.path.isabs(root):
            raise ConfigError(
                ConfigError.MISSING_ALLOWED_ROOT,
                "ALLOWED_UPLOAD_DIR must be set to an absolute directory",
            )
        root = canonical(root)

        entries = {}
        for key, destination in settings.keys.items():
            var = f"{KEY_PREFIX}{key}"
            if not is_valid_key(key):
                raise ConfigError(
                    ConfigError.INVALID_KEY_FORMAT,
                    f"Invalid environment key detected: {var}",
                    key=var,
                )
            if not destination or not is_contained(destination, root):
                raise ConfigError(
                    ConfigError.PATH_NOT_CONTAINED,
                    f"Invalid path for environment key: {var}",
                    key=var,
                )
            entries[key] = str(Path(destination).absolute())

        logger.info("Loaded %d upload key(s) under %s", len(entries), root)
        return cls(root, entries)

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
