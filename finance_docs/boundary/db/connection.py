"""
Database connection management.

Builds the async engine and session factory from DatabaseSettings. Nothing
here is cached at module level: the API owns one engine for its lifetime,
each worker task builds its own for the event loop it runs on.

Dependencies: sqlalchemy, asyncpg (PostgreSQL), aiosqlite (tests)
System role: Database connection lifecycle management
"""


from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from finance_docs.configs.database import DatabaseSettings


def get_async_engine(db_config: DatabaseSettings | None = None) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Pool sizing applies to PostgreSQL only; SQLite URLs get the driver's
    default pool.

    Args:
        db_config: Database settings (loaded from environment if None)

    Returns:
        AsyncEngine: Configured async engine
    """
    db_config = db_config or DatabaseSettings()
    url = db_config.async_database_url

    if url.startswith("sqlite"):
        return create_async_engine(url, echo=db_config.echo_sql)

    return create_async_engine(
        url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory bound to an engine.

    expire_on_commit=False keeps loaded rows readable after the store
    commits and closes the session.

    Args:
        engine: Async engine

    Returns:
        async_sessionmaker: Session factory for manual transaction control
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
