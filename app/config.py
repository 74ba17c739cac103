"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


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
class ServerSettings:
    """
    Process-level HTTP server settings.
    """

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"


@dataclass(frozen=True)
class CSVIngestionSettings:
    """
    Runtime settings for product CSV ingestion.
    """

    read_chunk_size: int = 64 * 1024
    upsert_batch_size: int = 1000
    log_validation_errors: bool = True
    disconnect_check_interval: int = 500


@dataclass(frozen=True)
class CatalogStoreSettings:
    """
    Catalog store lifecycle settings.
    """

    auto_create_schema: bool = True


@lru_cache(maxsize=1)
def get_server_settings() -> ServerSettings:
    """
    Return cached server settings from environment variables.
    """

    port = _get_int_env("PORT", 8000)
    return ServerSettings(
        host=_get_str_env("HOST", "0.0.0.0"),
        port=port if 0 < port < 65536 else 8000,
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_csv_ingestion_settings() -> CSVIngestionSettings:
    """
    Return cached CSV ingestion settings from environment variables.
    """

    return CSVIngestionSettings(
        read_chunk_size=max(1024, _get_int_env("CSV_INGEST_READ_CHUNK_SIZE", 64 * 1024)),
        upsert_batch_size=max(1, _get_int_env("CSV_INGEST_UPSERT_BATCH_SIZE", 1000)),
        log_validation_errors=_get_bool_env("CSV_INGEST_LOG_VALIDATION_ERRORS", True),
        disconnect_check_interval=max(1, _get_int_env("CSV_INGEST_DISCONNECT_CHECK_INTERVAL", 500)),
    )


@lru_cache(maxsize=1)
def get_catalog_store_settings() -> CatalogStoreSettings:
    """
    Return cached catalog store settings from environment variables.
    """

    return CatalogStoreSettings(
        auto_create_schema=_get_bool_env("CATALOG_AUTO_CREATE_SCHEMA", True),
    )
