"""
db/session.py

Engine and request-scoped sessions for the order store.

One engine serves the whole process. It is built lazily (normally by the
startup connectivity check) and released by dispose_engine() at shutdown.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from dataclasses import dataclass

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import resolve_database_url


@dataclass(frozen=True)
class EnginePoolSettings:
    """
    Connection pool tuning read from DB_* environment variables.
    """

    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle_seconds: int = 1800

    @classmethod
    def from_env(cls) -> "EnginePoolSettings":
        defaults = cls()
        return cls(
            echo=(os.getenv("SQL_ECHO") or "").strip().lower() in {"1", "true", "yes", "on"},
            pool_size=_env_int("DB_POOL_SIZE", defaults.pool_size),
            max_overflow=_env_int("DB_MAX_OVERFLOW", defaults.max_overflow),
            pool_recycle_seconds=_env_int("DB_POOL_RECYCLE", defaults.pool_recycle_seconds),
        )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def create_db_engine(pool: EnginePoolSettings | None = None) -> Engine:
    """
    Build the PostgreSQL engine for the configured database URL.
    """

    database_url = resolve_database_url()
    if not database_url.startswith("postgresql"):
        raise RuntimeError("Only PostgreSQL URLs are supported.")

    pool = pool or EnginePoolSettings.from_env()
    return create_engine(
        database_url,
        echo=pool.echo,
        pool_pre_ping=True,
        pool_size=pool.pool_size,
        max_overflow=pool.max_overflow,
        pool_recycle=pool.pool_recycle_seconds,
    )


_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def dispose_engine() -> None:
    """
    Close pooled connections. The next get_engine() call builds a new engine.
    """

    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


def SessionLocal() -> Session:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            autoflush=False,
            expire_on_commit=False,
        )
    return _session_factory()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding one session per request.
    """

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
