# tests/services/test_statistics.py
"""Tests for inkwell/services/statistics.py."""

from collections.abc import Awaitable, Callable
from unittest.mock import AsyncMock, patch
from uuid import UUID

import pytest
from sqlmodel.ext.asyncio.session import AsyncSession

from inkwell.configs import FLUSH_SIZE, STATISTIC_ID, PageType
from inkwell.errors import RepositoryError, ServiceError
from inkwell.managers.cache_manager import CacheManager
from inkwell.managers.metrics import metrics_manager
from inkwell.managers.page_cache import CachedPage, PageCache
from inkwell.models import ArticleDB, StatisticDB
from inkwell.services import StatisticsService

ArticleFactory = Callable[..., Awaitable[ArticleDB]]


@pytest.fixture
def service(session: AsyncSession, cache: CacheManager, page_cache: PageCache) -> StatisticsService:
    return StatisticsService(session, cache, page_cache)


def cache_article(page_cache: PageCache, article: ArticleDB, hits: int) -> None:
    page_cache.put(
        CachedPage(
            key=article.permalink,
            type=PageType.ARTICLE.label,
            oid=str(article.id),
            title=article.title,
            hit_count=hits,
        ),
    )


async def stored_view_count(session: AsyncSession, article_id: UUID) -> int:
    fresh = await session.get(ArticleDB, article_id, populate_existing=True)
    assert fresh is not None
    return fresh.view_count


class TestViewCounting:
    @pytest.mark.asyncio
    async def test_inc_blog_view_count_seeds_from_storage(
        self,
        service: StatisticsService,
        session: AsyncSession,
    ) -> None:
        statistic = await session.get(StatisticDB, STATISTIC_ID)
        assert statistic is not None
        statistic.blog_view_count = 41
        await session.commit()

        assert await service.inc_blog_view_count() == 42
        assert await service.inc_blog_view_count() == 43

        cached = await service.get_blog_statistic()
        assert cached is not None
        assert cached.blog_view_count == 43

    @pytest.mark.asyncio
    async def test_increments_stay_out_of_storage_until_sync(
        self,
        service: StatisticsService,
        session: AsyncSession,
    ) -> None:
        await service.inc_blog_view_count()
        await session.commit()

        stored = await session.get(StatisticDB, STATISTIC_ID, populate_existing=True)
        assert stored is not None
        assert stored.blog_view_count == 0

    @pytest.mark.asyncio
    async def test_online_visitors_are_counted_once_per_host(
        self,
        service: StatisticsService,
    ) -> None:
        await service.on_visit("10.0.0.1")
        await service.on_visit("10.0.0.1")
        await service.on_visit("10.0.0.2")

        assert await service.online_visitor_count() == 2


class TestSyncViewCounts:
    @pytest.mark.asyncio
    async def test_nothing_cached_is_a_no_op(
        self,
        service: StatisticsService,
        page_cache: PageCache,
        make_article: ArticleFactory,
        session: AsyncSession,
    ) -> None:
        article = await make_article()
        cache_article(page_cache, article, hits=5)

        result = await service.sync_view_counts()

        assert result.flushed is False
        assert await stored_view_count(session, article.id) == 0
        page = page_cache.get(article.permalink)
        assert page is not None
        assert page.hit_count == 5

    @pytest.mark.asyncio
    async def test_flushes_every_article_when_below_flush_size(
        self,
        service: StatisticsService,
        page_cache: PageCache,
        make_article: ArticleFactory,
        session: AsyncSession,
    ) -> None:
        articles = [await make_article() for _ in range(5)]
        for hits, article in enumerate(articles, start=1):
            cache_article(page_cache, article, hits=hits)
        await service.inc_blog_view_count()

        result = await service.sync_view_counts()

        assert result.flushed is True
        assert result.sampled_keys == 5
        assert result.articles == {str(a.id): hits for hits, a in enumerate(articles, start=1)}
        for hits, article in enumerate(articles, start=1):
            assert await stored_view_count(session, article.id) == hits
            page = page_cache.get(article.permalink)
            assert page is not None
            assert page.hit_count == 0

        statistic = await session.get(StatisticDB, STATISTIC_ID, populate_existing=True)
        assert statistic is not None
        assert statistic.blog_view_count == 1

    @pytest.mark.asyncio
    async def test_samples_at_most_flush_size_pages(
        self,
        service: StatisticsService,
        page_cache: PageCache,
        make_article: ArticleFactory,
        session: AsyncSession,
    ) -> None:
        articles = [await make_article() for _ in range(FLUSH_SIZE + 10)]
        for article in articles:
            cache_article(page_cache, article, hits=2)
        await service.inc_blog_view_count()

        result = await service.sync_view_counts()

        assert result.sampled_keys == FLUSH_SIZE
        assert len(result.articles) == FLUSH_SIZE
        counts = [await stored_view_count(session, article.id) for article in articles]
        assert counts.count(2) == FLUSH_SIZE
        assert counts.count(0) == 10
        reset = [p for a in articles if (p := page_cache.get(a.permalink)) and p.hit_count == 0]
        assert len(reset) == FLUSH_SIZE

    @pytest.mark.asyncio
    async def test_skips_non_article_pages_and_missing_articles(
        self,
        service: StatisticsService,
        page_cache: PageCache,
        make_article: ArticleFactory,
        session: AsyncSession,
    ) -> None:
        article = await make_article()
        cache_article(page_cache, article, hits=3)
        page_cache.put(
            CachedPage(key="/tags/python", type=PageType.TAG_ARTICLES.label, oid="python", title="python", hit_count=7),
        )
        page_cache.put(
            CachedPage(
                key="/posts/gone",
                type=PageType.ARTICLE.label,
                oid="00000000-0000-0000-0000-000000000000",
                title="gone",
                hit_count=4,
            ),
        )
        await service.inc_blog_view_count()

        result = await service.sync_view_counts()

        assert result.articles == {str(article.id): 3}
        assert await stored_view_count(session, article.id) == 3
        tag_page = page_cache.get("/tags/python")
        assert tag_page is not None
        assert tag_page.hit_count == 7

    @pytest.mark.asyncio
    async def test_failure_rolls_back_and_keeps_hit_counts(
        self,
        service: StatisticsService,
        page_cache: PageCache,
        make_article: ArticleFactory,
        session: AsyncSession,
    ) -> None:
        first, second = await make_article(), await make_article()
        cache_article(page_cache, first, hits=3)
        cache_article(page_cache, second, hits=4)
        await service.inc_blog_view_count()
        # the rollback expires loaded instances; keep plain values
        ids = [first.id, second.id]
        first_link, second_link = first.permalink, second.permalink

        original_update = service.articles.update
        calls = 0

        async def fail_on_second(record: ArticleDB) -> ArticleDB:
            nonlocal calls
            calls += 1
            if calls == 2:
                raise RepositoryError
            return await original_update(record)

        with (
            patch.object(service.articles, "update", AsyncMock(side_effect=fail_on_second)),
            pytest.raises(ServiceError),
        ):
            await service.sync_view_counts()

        for article_id in ids:
            assert await stored_view_count(session, article_id) == 0
        statistic = await session.get(StatisticDB, STATISTIC_ID, populate_existing=True)
        assert statistic is not None
        assert statistic.blog_view_count == 0
        for permalink, hits in ((first_link, 3), (second_link, 4)):
            page = page_cache.get(permalink)
            assert page is not None
            assert page.hit_count == hits

    @pytest.mark.asyncio
    async def test_query_cache_flag_restored_after_failure(
        self,
        service: StatisticsService,
        page_cache: PageCache,
        make_article: ArticleFactory,
    ) -> None:
        article = await make_article()
        cache_article(page_cache, article, hits=1)
        await service.inc_blog_view_count()

        with (
            patch.object(service.articles, "update", AsyncMock(side_effect=RepositoryError())),
            pytest.raises(ServiceError),
        ):
            await service.sync_view_counts()

        assert service.articles.cache_enabled is True
        assert service.statistics.cache_enabled is True

    @pytest.mark.asyncio
    async def test_reported_count_matches_written_count(
        self,
        service: StatisticsService,
        page_cache: PageCache,
        make_article: ArticleFactory,
        session: AsyncSession,
    ) -> None:
        article = await make_article()
        cache_article(page_cache, article, hits=3)
        await service.inc_blog_view_count()
        original_update = service.articles.update

        async def hit_during_update(record: ArticleDB) -> ArticleDB:
            page_cache.record_hit(article.permalink)
            return await original_update(record)

        with patch.object(service.articles, "update", AsyncMock(side_effect=hit_during_update)):
            result = await service.sync_view_counts()

        assert result.articles == {str(article.id): 3}
        assert await stored_view_count(session, article.id) == 3

    @pytest.mark.asyncio
    async def test_unflushed_statistic_outlives_cache_expiry(
        self,
        service: StatisticsService,
        session: AsyncSession,
    ) -> None:
        with patch("inkwell.clients.memory_client.monotonic", return_value=1000.0):
            await service.inc_blog_view_count()

        with patch("inkwell.clients.memory_client.monotonic", return_value=1000.0 + 10**9):
            result = await service.sync_view_counts()

        assert result.flushed is True
        statistic = await session.get(StatisticDB, STATISTIC_ID, populate_existing=True)
        assert statistic is not None
        assert statistic.blog_view_count == 1

    @pytest.mark.asyncio
    async def test_runs_and_failures_are_counted(
        self,
        service: StatisticsService,
        page_cache: PageCache,
        make_article: ArticleFactory,
    ) -> None:
        article = await make_article()
        cache_article(page_cache, article, hits=2)
        await service.inc_blog_view_count()
        before = metrics_manager.get_metrics()["view_sync"]

        with (
            patch.object(service.articles, "update", AsyncMock(side_effect=RepositoryError())),
            pytest.raises(ServiceError),
        ):
            await service.sync_view_counts()
        await service.sync_view_counts()

        after = metrics_manager.get_metrics()["view_sync"]
        assert after["failures"] == before["failures"] + 1
        assert after["runs"] == before["runs"] + 1
        assert after["articles_flushed"] == before["articles_flushed"] + 1
        assert after["views_flushed"] == before["views_flushed"] + 2
