"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import make_url

from users_api.config import get_settings
from users_api.infrastructure.database import Base, engine
from users_api.infrastructure.logging.log_config import setup_logging
from users_api.infrastructure.logging.request_logging import log_requests
from users_api.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


async def _ensure_database_exists() -> None:
    """Create the PostgreSQL database if it does not yet exist.

    Connects to the default ``postgres`` maintenance database, checks for the
    target database name, and issues ``CREATE DATABASE`` when missing.
    """
    import asyncpg

    settings = get_settings()
    url = make_url(settings.database_url)
    db_name = url.database
    if not db_name:
        return

    maintenance_url = url.set(drivername="postgresql", database="postgres")

    try:
        conn = await asyncpg.connect(maintenance_url.render_as_string(hide_password=False))
        try:
            exists = await conn.fetchval(
                "SELECT 1 FROM pg_database WHERE datname = $1", db_name
            )
            if not exists:
                # CREATE DATABASE cannot run inside a transaction block
                await conn.execute(f'CREATE DATABASE "{db_name}"')
                logger.info("Created database '%s'", db_name)
            else:
                logger.debug("Database '%s' already exists", db_name)
        finally:
            await conn.close()
    except Exception as exc:
        logger.warning("Could not auto-create database '%s': %s", db_name, exc)


def _ensure_sqlite_directory() -> None:
    """Create the parent directory of a file-backed SQLite database."""
    database = make_url(get_settings().database_url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)


async def prepare_database() -> None:
    """Make sure the database and the ``users`` table exist."""
    backend = make_url(get_settings().database_url).get_backend_name()
    if backend == "postgresql":
        await _ensure_database_exists()
    elif backend == "sqlite":
        _ensure_sqlite_directory()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging and create tables."""
    setup_logging()
    await prepare_database()
    logger.info("%s %s started", app.title, app.version)

    yield

    await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "users_api.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=not settings.is_production,
    )
