"""
Database URL resolution for the order store.
"""

from __future__ import annotations

import os
from pathlib import Path

ENV_FILE = Path(__file__).resolve().parents[1] / ".env"
DATABASE_URL_VARIABLES: tuple[str, ...] = ("DATABASE_URL", "LOCAL_DATABASE_URL")


def load_env_files() -> None:
    """
    Copy KEY=VALUE lines from the project `.env` into the environment.

    Variables already set in the process win.
    """

    if not ENV_FILE.is_file():
        return

    for line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        if key.strip():
            os.environ.setdefault(key.strip(), value.strip().strip('"').strip("'"))


def normalize_postgres_url(url: str) -> str:
    """
    Point postgres URLs at the psycopg (v3) driver.
    """

    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix) :]
    return url


def resolve_database_url() -> str:
    """
    Return the first of DATABASE_URL, LOCAL_DATABASE_URL that is set.
    """

    load_env_files()
    for name in DATABASE_URL_VARIABLES:
        value = os.getenv(name, "").strip()
        if value:
            return normalize_postgres_url(value)

    raise RuntimeError(
        "No database URL configured. Set DATABASE_URL or LOCAL_DATABASE_URL."
    )
