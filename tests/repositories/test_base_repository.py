# tests/repositories/test_base_repository.py
"""Tests for inkwell/repositories/base.py."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from inkwell.db import atomic
from inkwell.errors import DuplicateEntryError
from inkwell.managers.cache_manager import CacheManager
from inkwell.models import TagDB
from inkwell.repositories import TagRepository


@pytest.fixture
def repo(session: AsyncSession, cache: CacheManager) -> TagRepository:
    return TagRepository(session, cache)


async def insert_behind_repo(session: AsyncSession, title: str) -> None:
    session.add(TagDB(title=title))
    await session.commit()


@pytest.fixture
async def file_sessions(tmp_path: Path) -> AsyncGenerator[async_sessionmaker[AsyncSession]]:
    """Sessions on a file database, each on its own connection."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'blog.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    await engine.dispose()


class TestQuery:
    @pytest.mark.asyncio
    async def test_pagination_and_page_count(self, repo: TagRepository, session: AsyncSession) -> None:
        for title in ("a", "b", "c", "d", "e"):
            await insert_behind_repo(session, title)

        result = await repo.query(sort=[("title", False)], page=2, page_size=2)

        assert [tag.title for tag in result.results] == ["c", "d"]
        assert result.page_count == 3

    @pytest.mark.asyncio
    async def test_filters_and_descending_sort(self, repo: TagRepository, session: AsyncSession) -> None:
        for title in ("a", "b", "c"):
            await insert_behind_repo(session, title)

        result = await repo.query(sort=[("title", True)])
        filtered = await repo.query(filters={"title": "b"})

        assert [tag.title for tag in result.results] == ["c", "b", "a"]
        assert [tag.title for tag in filtered.results] == ["b"]

    @pytest.mark.asyncio
    async def test_results_are_cached_until_a_write(
        self,
        repo: TagRepository,
        session: AsyncSession,
    ) -> None:
        await insert_behind_repo(session, "a")
        assert len((await repo.query()).results) == 1

        await insert_behind_repo(session, "b")
        assert len((await repo.query()).results) == 1

        async with atomic(session):
            await repo.add(TagDB(title="c"))
        assert len((await repo.query()).results) == 3

    @pytest.mark.asyncio
    async def test_cache_disabled_reads_storage(self, repo: TagRepository, session: AsyncSession) -> None:
        await insert_behind_repo(session, "a")
        await repo.query()
        await insert_behind_repo(session, "b")

        with repo.cache_disabled():
            assert repo.cache_enabled is False
            assert len((await repo.query()).results) == 2

        assert repo.cache_enabled is True

    def test_cache_disabled_restores_flag_on_error(self, repo: TagRepository) -> None:
        with pytest.raises(RuntimeError), repo.cache_disabled():
            raise RuntimeError

        assert repo.cache_enabled is True

    def test_cache_disabled_keeps_a_disabled_flag(self, session: AsyncSession) -> None:
        repo = TagRepository(session)

        with repo.cache_disabled():
            pass

        assert repo.cache_enabled is False


class TestWrites:
    @pytest.mark.asyncio
    async def test_unique_violation(self, repo: TagRepository, session: AsyncSession) -> None:
        await insert_behind_repo(session, "python")

        with pytest.raises(DuplicateEntryError):
            await repo.add(TagDB(title="python"))
        await session.rollback()

    @pytest.mark.asyncio
    async def test_update_and_remove(self, repo: TagRepository, session: AsyncSession) -> None:
        tag = await repo.add(TagDB(title="python"))
        tag.reference_count = 4
        await repo.update(tag)
        await session.commit()

        stored = await repo.get_by_field("title", "python")
        assert stored is not None
        assert stored.reference_count == 4

        assert await repo.remove(tag.id) is True
        assert await repo.remove(tag.id) is False


class TestCacheInvalidation:
    @pytest.mark.asyncio
    async def test_namespace_is_cleared_after_commit(
        self,
        repo: TagRepository,
        session: AsyncSession,
        cache: CacheManager,
    ) -> None:
        await cache.set("page", {"results": [], "page_count": 0}, namespace=repo.cache_namespace)

        async with atomic(session):
            await repo.add(TagDB(title="a"))
            assert await cache.get("page", repo.cache_namespace) is not None

        assert await cache.get("page", repo.cache_namespace) is None

    @pytest.mark.asyncio
    async def test_rollback_keeps_the_namespace(
        self,
        repo: TagRepository,
        session: AsyncSession,
        cache: CacheManager,
    ) -> None:
        await cache.set("page", {"results": [], "page_count": 0}, namespace=repo.cache_namespace)

        with pytest.raises(RuntimeError):
            async with atomic(session):
                await repo.add(TagDB(title="a"))
                raise RuntimeError

        assert await cache.get("page", repo.cache_namespace) is not None
        with repo.cache_disabled():
            assert (await repo.query()).results == []

    @pytest.mark.asyncio
    async def test_other_session_never_sees_uncommitted_rows(
        self,
        file_sessions: async_sessionmaker[AsyncSession],
        cache: CacheManager,
    ) -> None:
        async with file_sessions() as writer_session:
            writer = TagRepository(writer_session, cache)
            async with atomic(writer_session):
                await writer.add(TagDB(title="draft"))
                assert [tag.title for tag in (await writer.query()).results] == ["draft"]

                async with file_sessions() as reader_session:
                    reader = TagRepository(reader_session, cache)
                    assert (await reader.query()).results == []

        async with file_sessions() as reader_session:
            reader = TagRepository(reader_session, cache)
            assert [tag.title for tag in (await reader.query()).results] == ["draft"]

    @pytest.mark.asyncio
    async def test_rolled_back_rows_never_reach_the_cache(
        self,
        file_sessions: async_sessionmaker[AsyncSession],
        cache: CacheManager,
    ) -> None:
        async with file_sessions() as writer_session:
            writer = TagRepository(writer_session, cache)
            with pytest.raises(RuntimeError):
                async with atomic(writer_session):
                    await writer.add(TagDB(title="draft"))
                    await writer.query()
                    raise RuntimeError

        async with file_sessions() as reader_session:
            reader = TagRepository(reader_session, cache)
            assert (await reader.query()).results == []
