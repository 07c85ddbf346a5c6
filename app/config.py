"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

_TRUE_VALUES = {"1", "true", "yes", "on"}


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
    return raw_value.strip().lower() in _TRUE_VALUES


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value.strip())
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class OrderImportSettings:
    """
    Runtime settings for order ingestion.
    """

    max_rows_per_import: int = 2000
    lookup_chunk_size: int = 500
    max_commit_attempts: int = 3
    log_rejections: bool = True
    default_order_type: str = "Order"


@dataclass(frozen=True)
class AnalyticsSettings:
    """
    Limits for order analytics queries.
    """

    max_range_days: int = 366


@dataclass(frozen=True)
class LoggingSettings:
    """
    Process logging settings.
    """

    level: str = "INFO"


@lru_cache(maxsize=1)
def get_order_import_settings() -> OrderImportSettings:
    """
    Return cached order import settings from environment variables.
    """

    return OrderImportSettings(
        max_rows_per_import=max(1, _get_int_env("ORDER_IMPORT_MAX_ROWS", 2000)),
        lookup_chunk_size=max(1, _get_int_env("ORDER_IMPORT_LOOKUP_CHUNK_SIZE", 500)),
        max_commit_attempts=max(1, _get_int_env("ORDER_IMPORT_MAX_COMMIT_ATTEMPTS", 3)),
        log_rejections=_get_bool_env("ORDER_IMPORT_LOG_REJECTIONS", True),
        default_order_type=_get_str_env("ORDER_IMPORT_DEFAULT_TYPE", "Order"),
    )


@lru_cache(maxsize=1)
def get_analytics_settings() -> AnalyticsSettings:
    """
    Return cached analytics settings from environment variables.
    """

    return AnalyticsSettings(
        max_range_days=max(1, _get_int_env("ANALYTICS_MAX_RANGE_DAYS", 366)),
    )


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """
    Return cached logging settings.
    """

    return LoggingSettings(level=_get_str_env("LOG_LEVEL", "INFO").upper())
