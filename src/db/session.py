"""Database session management for the API (async) and the worker (sync)."""

from collections.abc import AsyncGenerator

from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import sessionmaker

from config import settings

# API side: asyncpg, one session per request
# - pool_pre_ping: checks pooled connections before handing them out
# - echo: logs every SQL statement when debug is on
engine = create_async_engine(
    settings.database_url,
    pool_pre_ping=True,
    echo=settings.debug,
)

# Session factory for request-scoped sessions
# - expire_on_commit=False: ORM objects stay readable after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def sync_database_url(url: str) -> str:
    """Celery tasks are synchronous, so swap the async driver for psycopg2."""
    return url.replace("+asyncpg", "+psycopg2")


# Worker side: created lazily so importing the API never opens a psycopg2 pool
_sync_session_factory: sessionmaker | None = None


def get_sync_session_factory() -> sessionmaker:
    """Session factory for Celery tasks, bound to a psycopg2 engine."""
    global _sync_session_factory
    if _sync_session_factory is None:
        sync_engine = create_engine(
            sync_database_url(settings.database_url),
            pool_pre_ping=True,
            echo=settings.debug,
        )
        _sync_session_factory = sessionmaker(bind=sync_engine, expire_on_commit=False)
    return _sync_session_factory


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a session that commits on success.

    Usage:
        @router.get("/analyses")
        async def list_analyses(db: AsyncSession = Depends(get_db_session)):
            ...

    Any exception raised by the endpoint rolls the transaction back.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
