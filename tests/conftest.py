"""Pytest configuration and fixtures for cmscore.

Query construction tests compile statements to SQL strings and need no
database. Execution tests use an in-memory SQLite database via aiosqlite.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cmscore.core.config import get_settings
from cmscore.orm.database import Base
from tests.models import Article, Author, Comment, NewsPage, Page


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Isolate settings per test: clear the cache before and after.

    Tests override values with monkeypatch.setenv(...) followed by
    get_settings.cache_clear().
    """
    for name in (
        "ENVIRONMENT_TYPE",
        "SEARCH_MAX_LIMIT",
        "SEARCH_DEFAULT_CONNECTIVE",
        "TELEMETRY_ENABLED",
        "DATABASE_URL",
        "DEBUG",
        "LOG_LEVEL",
        "SEARCH_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Session on a fresh in-memory SQLite database with all tables created."""
    pytest.importorskip("aiosqlite")
    engine = create_async_engine("sqlite+aiosqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
async def seeded_session(db_session: AsyncSession) -> AsyncSession:
    """db_session with a small set of authors, articles, comments and pages."""
    ann = Author(name="Ann Smith", email="ann@example.com")
    bob = Author(name="Bob Jones")
    db_session.add_all([ann, bob])
    await db_session.flush()
    hello = Article(title="Hello World", views=10, status="published", author=ann)
    db_session.add_all(
        [
            hello,
            Article(title="Second Post", views=3, status="draft", author=ann),
            Article(title="100% Pure", views=7, status="published", author=bob),
            Article(title=None, views=0, status="draft"),
        ]
    )
    await db_session.flush()
    db_session.add_all(
        [
            Comment(body="Great read", article=hello, author=bob),
            Comment(body="Agreed", article=hello, author=ann),
            Page(title="About"),
            NewsPage(title="News", headline="Launch"),
        ]
    )
    await db_session.commit()
    return db_session
