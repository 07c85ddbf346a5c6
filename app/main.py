from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import get_logging_settings

logger = logging.getLogger(__name__)


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Raises RuntimeError listing every problem so the operator can fix all of
    them in one restart cycle.
    """

    from db.config import DATABASE_URL_VARIABLES, load_env_files

    load_env_files()

    errors: list[str] = []

    if not any(os.getenv(name, "").strip() for name in DATABASE_URL_VARIABLES):
        errors.append(
            "No database URL configured. Set "
            + " or ".join(DATABASE_URL_VARIABLES)
            + "."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed - missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = get_logging_settings().level
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text

    from db.session import SessionLocal

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc


def _check_schema() -> None:
    """
    Every table registered on Base.metadata must exist in the database.

    Does NOT auto-migrate.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401 - registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        logger.critical(
            "Schema mismatch: %d table(s) defined in ORM metadata are absent from "
            "the database: %s. Run 'alembic upgrade head' and restart.",
            len(missing),
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Acquire the order store on boot and release it on exit."""
    from db.session import dispose_engine

    _check_db()
    logger.info("Database connectivity confirmed")
    _check_schema()
    logger.info("Database schema validated")
    try:
        yield
    finally:
        dispose_engine()
        logger.info("Database engine disposed")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="BizTrack Pro API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import analytics_router, orders_router

    application.include_router(orders_router)
    application.include_router(analytics_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "healthy"}

    return application


app = create_app()
