# tests/routes/conftest.py
"""Pytest fixtures for route tests."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from inkwell.clients.http_client import HttpFetchClient
from inkwell.db import get_session
from inkwell.events import EventManager
from inkwell.main import app
from inkwell.managers.cache_manager import CacheManager
from inkwell.managers.page_cache import PageCache
from inkwell.managers.token_manager import create_session_token
from inkwell.models import UserDB


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    cache: CacheManager,
    page_cache: PageCache,
    events: EventManager,
) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client wired to the test database and managers."""

    async def test_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = test_session
    app.state.cache_manager = cache
    app.state.page_cache = page_cache
    app.state.event_manager = events
    app.state.http_client = HttpFetchClient()
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(admin_user: UserDB) -> dict[str, str]:
    """Create auth headers for the administrator."""
    return {"Authorization": f"Bearer {create_session_token(admin_user.id, admin_user.email)}"}


@pytest.fixture
def user_headers(regular_user: UserDB) -> dict[str, str]:
    """Create auth headers for a default-role user."""
    return {"Authorization": f"Bearer {create_session_token(regular_user.id, regular_user.email)}"}
