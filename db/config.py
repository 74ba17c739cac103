"""
Environment-driven database configuration helpers.
"""

from __future__ import annotations

import os
from pathlib import Path

_ENV_FILENAMES = (".env", ".env.local")


def load_env_files() -> None:
    """
    Load KEY=VALUE pairs from `.env` and `.env.local` at the project root.

    Variables already present in the process environment win.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in _ENV_FILENAMES:
        env_path = project_root / filename
        if not env_path.is_file():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export ") :].strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


def normalize_postgres_url(url: str) -> str:
    """
    Rewrite bare postgres URLs to the psycopg 3 driver form.
    """

    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def resolve_database_url() -> str:
    """
    Return the catalog store connection string from DATABASE_URL.
    """

    load_env_files()

    url = (os.getenv("DATABASE_URL") or "").strip()
    if not url:
        raise RuntimeError(
            "No database URL configured. Set DATABASE_URL to the catalog store "
            "connection string."
        )
    return normalize_postgres_url(url)
