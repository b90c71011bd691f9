"""
FastAPI application entry point.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from portfolio.api.v1.api import api_router
from portfolio.core.config import settings
from portfolio.core.database import create_db_and_tables
from portfolio.core.logging_config import log_info, setup_logging


@asynccontextmanager
async def lifespan(_app: FastAPI):
    setup_logging()
    if settings.database_url.startswith("sqlite"):
        # PostgreSQL deployments are migrated with Alembic instead.
        create_db_and_tables()
    log_info(f"{settings.app_name} {settings.app_version} started ({settings.environment})")
    yield


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.include_router(api_router, prefix=settings.api_v1_prefix)

    @application.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "version": settings.app_version}

    return application


app = create_app()
