"""Failure kinds and their client-facing translation."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")

SERVER_ERROR_MESSAGE = "Could not process upload"


class ErrorKind(str, Enum):
    NO_FILE = "no_file"
    INVALID_KEY = "invalid_key"
    UNSUPPORTED_TYPE = "unsupported_type"
    UNSUPPORTED_EXTENSION = "unsupported_extension"
    INVALID_PATH = "invalid_path"
    UNSUPPORTED_REQUEST = "unsupported_request"
    SIZE_LIMIT_EXCEEDED = "size_limit_exceeded"
    RATE_LIMITED = "rate_limited"
    IO_FAILURE = "io_failure"
    INTERNAL = "internal"


_RESPONSES: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.NO_FILE: (400, "File not provided"),
    ErrorKind.INVALID_KEY: (400, "Invalid key provided"),
    ErrorKind.UNSUPPORTED_TYPE: (400, "Unsupported file type"),
    ErrorKind.UNSUPPORTED_EXTENSION: (400, "Unsupported file extension"),
    ErrorKind.INVALID_PATH: (400, "Invalid upload path"),
    ErrorKind.UNSUPPORTED_REQUEST: (400, "That request is not supported"),
    ErrorKind.SIZE_LIMIT_EXCEEDED: (413, "File size limit has been reached"),
    ErrorKind.RATE_LIMITED: (429, "Too many requests, please try again later"),
    ErrorKind.IO_FAILURE: (500, SERVER_ERROR_MESSAGE),
    ErrorKind.INTERNAL: (500, SERVER_ERROR_MESSAGE),
}


def translate(kind: ErrorKind | None) -> tuple[int, str]:
    """Map a failure kind to (HTTP status, client-safe message).

    Anything unrecognised becomes a generic server error.
    """
    return _RESPONSES.get(kind, _RESPONSES[ErrorKind.INTERNAL])


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: T | None = None
    error: ErrorKind | None = None
    # server-side only, never sent to the client
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def success(value: T) -> Outcome[T]:
    return Outcome(value=value)


def failure(kind: ErrorKind, detail: str | None = None) -> Outcome:
    return Outcome(error=kind, detail=detail)


class ConfigError(Exception):
    """Startup configuration is unusable; the listener must not be bound."""

    INVALID_KEY_FORMAT = "invalid_key_format"
    PATH_NOT_CONTAINED = "path_not_contained"
    MISSING_ALLOWED_ROOT = "missing_allowed_root"

    def __init__(self, reason: str, message: str, key: str | None = None):
        self.reason = reason
        self.key = key
        super().__init__(message)
