"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

DEFAULT_BATCH_SIZE = 1000
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class PropertyImportSettings:
    """
    Runtime settings for property CSV imports.
    """

    batch_size: int = DEFAULT_BATCH_SIZE
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    log_validation_errors: bool = True


@lru_cache(maxsize=1)
def get_property_import_settings() -> PropertyImportSettings:
    """
    Return cached property import settings from environment variables.
    """

    return PropertyImportSettings(
        batch_size=max(1, _get_int_env("PROPERTY_IMPORT_BATCH_SIZE", DEFAULT_BATCH_SIZE)),
        max_upload_bytes=max(1, _get_int_env("PROPERTY_IMPORT_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
        log_validation_errors=_get_bool_env("PROPERTY_IMPORT_LOG_VALIDATION_ERRORS", True),
    )
