"""
Environment-driven settings.

Every value has a development fallback so the API boots on a laptop with a
local Postgres and no configuration at all.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5 MiB
DEFAULT_MAX_DOCUMENT_BYTES = 20 * 1024 * 1024  # 20 MiB


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def db_host() -> str:
    return _env_str("DB_HOST", "localhost")


def db_port() -> int:
    return _env_int("DB_PORT", 5432)


def db_user() -> str:
    return _env_str("DB_USER", "postgres")


def db_password() -> str:
    # Empty password is a valid local setup, so no fallback substitution here.
    return os.environ.get("DB_PASSWORD", "")


def db_name() -> str:
    return _env_str("DB_NAME", "dealership")


def db_pool_min() -> int:
    return max(_env_int("DB_POOL_MIN", 1), 1)


def db_pool_max() -> int:
    return max(_env_int("DB_POOL_MAX", 10), db_pool_min())


def db_command_timeout() -> int:
    return _env_int("DB_COMMAND_TIMEOUT", 30)


def upload_root() -> Path:
    return Path(_env_str("UPLOAD_ROOT", "uploads")).resolve()


def max_image_bytes() -> int:
    value = _env_int("MAX_IMAGE_BYTES", DEFAULT_MAX_IMAGE_BYTES)
    return value if value > 0 else DEFAULT_MAX_IMAGE_BYTES


def max_document_bytes() -> int:
    value = _env_int("MAX_DOCUMENT_BYTES", DEFAULT_MAX_DOCUMENT_BYTES)
    return value if value > 0 else DEFAULT_MAX_DOCUMENT_BYTES


def port() -> int:
    return _env_int("PORT", 8000)


def cors_origins() -> list[str]:
    raw = _env_str("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def log_dir() -> Path | None:
    raw = os.environ.get("LOG_DIR", "").strip()
    return Path(raw) if raw else None
