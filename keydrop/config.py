import os
from typing import Mapping
from pydantic import BaseModel, ConfigDict
from dotenv import load_dotenv

KEY_PREFIX = "KEY_"
MB = 1024 * 1024
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(env.get(name, ""))
    except ValueError:
        return default


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    # like parseInt(...) || default: zero and negatives mean "unset"
    value = _int(env, name, default)
    return value if value > 0 else default


def _log_level(env: Mapping[str, str]) -> str:
    level = env.get("LOG_LEVEL", "INFO").strip().upper()
    return level if level in LOG_LEVELS else "INFO"


def _flag(env: Mapping[str, str], name: str) -> bool:
    # anything but the literal "false" keeps the feature on
    return env.get(name, "").strip().lower() != "false"


def _csv(env: Mapping[str, str], name: str) -> tuple[str, ...] | None:
    items = tuple(p.strip() for p in env.get(name, "").split(",") if p.strip())
    return items or None


class RateLimit(BaseModel):
    model_config = ConfigDict(frozen=True)

    window_seconds: int
    max_requests: int


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed_upload_dir: str | None = None
    keys: dict[str, str] = {}
    max_file_size: int | None = None  # bytes, None = unlimited
    max_files: int = 1
    allowed_mime_types: tuple[str, ...] | None = None
    allowed_extensions: tuple[str, ...] | None = None
    upload_rate_limit: RateLimit = RateLimit(window_seconds=15 * 60, max_requests=10)
    page_rate_limit: RateLimit = RateLimit(window_seconds=15 * 60, max_requests=20)
    enable_rate_limiter: bool = True
    rate_limit_storage_uri: str = "memory://"
    logging_enabled: bool = True
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from process environment (or the given mapping).

        ``KEY_<name>`` variables become key mappings verbatim; they are
        validated when the key registry is loaded, not here.
        """
        env = os.environ if environ is None else environ
        max_mb = _int(env, "MAX_FILE_SIZE", 0)
        extensions = _csv(env, "ALLOWED_EXTENSIONS")
        if extensions:
            extensions = tuple(e.lstrip(".").lower() for e in extensions)
        return cls(
            allowed_upload_dir=env.get("ALLOWED_UPLOAD_DIR") or None,
            keys={k[len(KEY_PREFIX):]: v for k, v in env.items() if k.startswith(KEY_PREFIX)},
            max_file_size=max_mb * MB if max_mb > 0 else None,
            max_files=max(_int(env, "MAX_FILES", 1), 1),
            allowed_mime_types=_csv(env, "ALLOWED_MIME_TYPES"),
            allowed_extensions=extensions,
            upload_rate_limit=RateLimit(
                window_seconds=_positive_int(env, "UPLOAD_RATE_LIMIT_WINDOW_MINUTES", 15) * 60,
                max_requests=_positive_int(env, "UPLOAD_RATE_LIMIT_MAX", 10),
            ),
            page_rate_limit=RateLimit(
                window_seconds=_positive_int(env, "PAGE_RATE_LIMIT_WINDOW_MINUTES", 15) * 60,
                max_requests=_positive_int(env, "PAGE_RATE_LIMIT_MAX", 20),
            ),
            enable_rate_limiter=_flag(env, "ENABLE_RATE_LIMITER") and _flag(env, "RATE_LIMIT"),
            rate_limit_storage_uri=env.get("RATE_LIMIT_STORAGE_URI", "memory://"),
            logging_enabled=_flag(env, "LOGGING_ENABLED"),
            log_level=_log_level(env),
            host=env.get("HOST", "0.0.0.0"),
            port=_int(env, "PORT", 3000),
        )


def get_settings() -> Settings:
    load_dotenv()
    return Settings.from_env()
