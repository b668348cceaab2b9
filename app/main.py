from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Runs before any database connection is opened and raises RuntimeError
    listing every problem so the operator can fix them in one restart.
    """

    from db.config import load_env_files

    load_env_files()

    errors: list[str] = []

    database_urls = (
        os.getenv("DATABASE_URL", "").strip(),
        os.getenv("CLOUD_DATABASE_URL", "").strip(),
        os.getenv("LOCAL_DATABASE_URL", "").strip(),
    )
    if not any(database_urls):
        errors.append(
            "No database URL configured. Set DATABASE_URL, CLOUD_DATABASE_URL "
            "or LOCAL_DATABASE_URL."
        )

    for name in ("PROPERTY_IMPORT_BATCH_SIZE", "PROPERTY_IMPORT_MAX_UPLOAD_BYTES"):
        raw = os.getenv(name)
        if raw is None:
            continue
        try:
            if int(raw) < 1:
                errors.append(f"{name} must be a positive integer, got {raw!r}.")
        except ValueError:
            errors.append(f"{name} must be an integer, got {raw!r}.")

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
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
    Abort startup when a table registered on Base.metadata is missing from
    the live database. Does NOT auto-migrate.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401 — registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    missing = set(Base.metadata.tables.keys()) - actual

    if missing:
        logging.getLogger(__name__).critical(
            "Schema mismatch: table(s) %s absent from the database. "
            "Run 'alembic upgrade head' and restart.",
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity and schema on boot."""
    _check_db()
    logging.getLogger(__name__).info("Database connectivity confirmed")
    _check_schema()
    logging.getLogger(__name__).info("Database schema validated")
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Property Import API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.errors import register_exception_handlers
    from app.api.routers import property_import_router

    register_exception_handlers(application)
    application.include_router(property_import_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
