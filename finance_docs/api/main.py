"""
FastAPI application with assembled routers.

Dependencies: fastapi, uvicorn, finance_docs.api.routers
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finance_docs.api.deps.dependencies import get_service_cache
from finance_docs.configs import get_settings
from finance_docs.observability.logger import configure_logging
from finance_docs.observability.middleware import RequestLoggingMiddleware

from .routers import documents_router, health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Opens the database engine on startup and disposes it on shutdown.
    """
    logger = logging.getLogger("uvicorn")

    cache = get_service_cache()
    _ = cache.session_factory
    logger.info("Database engine ready")

    yield

    await cache.close()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Finance Docs API",
        description="PDF upload and ingestion for the personal-finance assistant",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "finance_docs.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
