"""
Dependency injection for the HTTP API.

The service cache owns the engine for the lifetime of the app; request
dependencies build services on top of it.

Dependencies: fastapi, finance_docs.configs, finance_docs.boundary, finance_docs.workers
System role: DI container for service injection
"""

from functools import lru_cache
from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from finance_docs.application.services.document_service import DocumentService
from finance_docs.boundary.db.connection import get_async_engine, get_async_session_factory
from finance_docs.boundary.db.stores import DocumentStatusStore
from finance_docs.configs import Settings, get_settings
from finance_docs.workers.queue import IngestionQueue


class ServiceCache:
    """Container for lazily created, app-lifetime instances."""

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._ingestion_queue: IngestionQueue | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = get_async_engine(get_settings().database)
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = get_async_session_factory(self.engine)
        return self._session_factory

    @property
    def ingestion_queue(self) -> IngestionQueue:
        if self._ingestion_queue is None:
            self._ingestion_queue = IngestionQueue()
        return self._ingestion_queue

    async def close(self) -> None:
        """Dispose the engine and forget every cached instance."""
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        self._ingestion_queue = None


_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> UUID:
    """
    Resolve the calling user from the X-User-Id header.

    Authentication happens upstream; this only reads the identity it set.

    Raises:
        HTTPException(401): Header missing or not a UUID
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        return UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Unauthorized")


def get_document_service(
    cache: ServiceCache = Depends(get_service_cache),
    settings: Settings = Depends(get_settings_dependency),
) -> DocumentService:
    """
    Get document service instance.

    Args:
        cache: App-lifetime service cache
        settings: Application settings

    Returns:
        DocumentService: Document service instance
    """
    return DocumentService(
        document_store=DocumentStatusStore(cache.session_factory),
        ingestion_queue=cache.ingestion_queue,
        settings=settings.pipeline,
    )
