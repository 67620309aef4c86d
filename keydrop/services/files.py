from typing import Iterable

from ..errors import ErrorKind, Outcome, failure, success
from ..models import IncomingFile


class FileValidator:
    """Optional allow-lists for declared media type and file name extension.

    ``None`` for either list means that axis is not checked.
    """

    def __init__(self, allowed_media_types: Iterable[str] | None = None,
                 allowed_extensions: Iterable[str] | None = None):
        self.allowed_media_types = frozenset(allowed_media_types) if allowed_media_types is not None else None
        self.allowed_extensions = (
            frozenset(e.lstrip(".").lower() for e in allowed_extensions)
            if allowed_extensions is not None else None
        )

    def media_type_allowed(self, file: IncomingFile) -> bool:
        return self.allowed_media_types is None or file.media_type in self.allowed_media_types

    def extension_allowed(self, file: IncomingFile) -> bool:
        return self.allowed_extensions is None or file.extension in self.allowed_extensions

    def validate(self, file: IncomingFile) -> Outcome[IncomingFile]:
        if not self.media_type_allowed(file):
            return failure(ErrorKind.UNSUPPORTED_TYPE, f"media type {file.media_type!r}")
        if not self.extension_allowed(file):
            return failure(ErrorKind.UNSUPPORTED_EXTENSION, f"extension {file.extension!r}")
        return success(file)
