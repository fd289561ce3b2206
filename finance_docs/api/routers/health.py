"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: fastapi, sqlalchemy
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from finance_docs.api.deps import get_service_cache
from finance_docs.api.deps.dependencies import ServiceCache

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(cache: ServiceCache = Depends(get_service_cache)) -> HealthResponse:
    """Database connectivity check."""
    try:
        async with cache.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"{__name__}:health_check_db - Database unreachable", extra={"error_msg": str(e)})
        return HealthResponse(status="unhealthy", message="Database unreachable")
    return HealthResponse(status="healthy", message="Database connection OK")
