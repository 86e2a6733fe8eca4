"""Persistence: async engine, session factory, and Base for mapped data classes.

Engine and session factory are created lazily on first use so importing
models (or building queries) never touches Settings or a database. Query
construction in cmscore.orm needs no engine at all; only DataList
execution does.
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from cmscore.core.config import get_settings

logger = logging.getLogger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: Any = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


class Base(DeclarativeBase):
    """Base class for all mapped data classes.

    Subclasses may declare:
        __default_sort__: sort spec used when a DataList is sorted with None/False.
        __searchable_fields__: field names (or name -> spec mapping) used to
            scaffold the default SearchContext.
    """


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use (when database_url is set)."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    if not settings.database_url:
        return
    engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    logger.info("Database engine created for %s", engine.url.render_as_string(hide_password=True))


async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield a session from the lazily created factory.

    Raises:
        RuntimeError: If database_url is not configured.
    """
    _ensure_engine()
    if AsyncSessionLocal is None:
        raise RuntimeError("DATABASE_URL is not configured; cannot open a session.")
    async with AsyncSessionLocal() as session:
        yield session


async def dispose_engine() -> None:
    """Dispose the engine (call on application shutdown)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncSessionLocal = None
