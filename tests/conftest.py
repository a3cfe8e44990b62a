# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Must happen before inkwell is imported anywhere
os.environ["PASSWORD_SECURITY_LEVEL"] = "low"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["REDIS_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BLOG_HOST"] = "localhost:8000"
os.environ["LOCALE"] = "en_US"

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from datetime import UTC, datetime  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

import inkwell.models  # noqa: E402, F401
from inkwell.configs import ADMIN_ROLE  # noqa: E402
from inkwell.db import seed_singletons  # noqa: E402
from inkwell.events import EventManager  # noqa: E402
from inkwell.managers.cache_manager import CacheManager  # noqa: E402
from inkwell.managers.page_cache import PageCache  # noqa: E402
from inkwell.models import ArticleDB, UserDB  # noqa: E402
from inkwell.services import UserMgmtService  # noqa: E402

ArticleFactory = Callable[..., Awaitable[ArticleDB]]


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """In-memory SQLite engine shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory over the test engine, with the singleton rows seeded."""
    factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with factory() as session:
        await seed_singletons(session)
        await session.commit()
    return factory


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def cache() -> AsyncGenerator[CacheManager]:
    """In-memory cache manager."""
    manager = CacheManager()
    try:
        await manager.initialize()
        yield manager
    finally:
        await manager.shutdown()


@pytest.fixture
def page_cache() -> PageCache:
    return PageCache(max_entries=1000)


@pytest.fixture
def events() -> EventManager:
    return EventManager()


@pytest.fixture
def make_article(session: AsyncSession) -> ArticleFactory:
    """Create and commit articles with sensible defaults."""
    counter = 0

    async def factory(**overrides: Any) -> ArticleDB:
        nonlocal counter
        counter += 1
        fields: dict[str, Any] = {
            "title": f"Article {counter}",
            "permalink": f"/posts/{counter}",
            "content": f"Content of article {counter}",
            "is_published": True,
            "updated_at": datetime(2013, 1, 18, 10, 0, tzinfo=UTC),
        }
        fields.update(overrides)
        article = ArticleDB(**fields)
        session.add(article)
        await session.commit()
        return article

    return factory


@pytest.fixture
async def admin_user(session: AsyncSession) -> UserDB:
    """A stored administrator with password ``admin-password``."""
    service = UserMgmtService(session)
    user_id = await service.add_user("admin", "admin@example.com", "admin-password", ADMIN_ROLE)
    user = await service.users.get_by_id(user_id)
    assert user is not None
    return user


@pytest.fixture
async def regular_user(session: AsyncSession) -> UserDB:
    """A stored default-role user with password ``user-password``."""
    service = UserMgmtService(session)
    user_id = await service.add_user("reader", "reader@example.com", "user-password")
    user = await service.users.get_by_id(user_id)
    assert user is not None
    return user
