"""
Blog and article view statistics.

Views are counted in memory on the request path: the blog-wide counter in
the cache manager, per-article hits on the page cache entries. The counts
reach the database only when ``sync_view_counts`` runs, triggered on a
schedule by an external caller.
"""

from dataclasses import dataclass, field
from random import random, sample
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.configs import FLUSH_SIZE, STATISTIC_ID, PageType, get_label, settings
from inkwell.db import atomic
from inkwell.errors import RepositoryError, ServiceError
from inkwell.managers.cache_manager import CacheManager
from inkwell.managers.metrics import metrics_manager
from inkwell.managers.page_cache import PageCache
from inkwell.models import StatisticDB
from inkwell.monitoring import get_logger
from inkwell.monitoring.tracing import add_span_attributes, get_tracer
from inkwell.repositories import ArticleRepository, StatisticRepository

logger = get_logger(__name__)

STAT_NAMESPACE = "stat"
ONLINE_NAMESPACE = "online"


@dataclass
class ViewCountSyncResult:
    """What one synchronization wrote."""

    flushed: bool = False
    sampled_keys: int = 0
    articles: dict[str, int] = field(default_factory=dict)


class StatisticsService:
    """Counts views and flushes them into storage."""

    def __init__(self, session: AsyncSession, cache: CacheManager, page_cache: PageCache) -> None:
        self.session = session
        self.cache = cache
        self.page_cache = page_cache
        self.statistics = StatisticRepository(session, cache)
        self.articles = ArticleRepository(session, cache)

    async def get_blog_statistic(self) -> StatisticDB | None:
        """The cached blog-wide statistic, if any."""
        cached = await self.cache.get(STATISTIC_ID, STAT_NAMESPACE)
        if cached is None:
            return None
        return StatisticDB.model_validate(cached)

    async def inc_blog_view_count(self) -> int:
        """
        Count one blog view in the cache.

        Seeds the cached statistic from storage on first use. The entry never
        expires and is not evicted before expiring entries, so unflushed
        views are lost only with the process. Concurrent increments can race,
        so the count is approximate.

        Returns:
            int: The new blog view count
        """
        statistic = await self.get_blog_statistic()
        if statistic is None:
            stored = await self.statistics.get_statistic()
            # detached copy: the session must not write the count back on commit
            statistic = StatisticDB.model_validate(stored.model_dump()) if stored else StatisticDB(id=STATISTIC_ID)
        statistic.blog_view_count += 1
        await self.cache.set(
            STATISTIC_ID,
            statistic.model_dump(mode="json"),
            namespace=STAT_NAMESPACE,
            persist=True,
        )
        return statistic.blog_view_count

    async def on_visit(self, client_host: str) -> None:
        """Mark ``client_host`` online for ``ONLINE_VISITOR_EXPIRATION`` seconds."""
        await self.cache.set(
            client_host,
            1,
            ttl=settings.ONLINE_VISITOR_EXPIRATION,
            namespace=ONLINE_NAMESPACE,
        )

    async def online_visitor_count(self) -> int:
        """Count visitors seen within the expiration window; expired ones drop out."""
        return await self.cache.count(ONLINE_NAMESPACE)

    def _sample_keys(self) -> set[str]:
        keys = self.page_cache.keys()
        if len(keys) > FLUSH_SIZE:
            return set(sample(sorted(keys), FLUSH_SIZE))
        return keys

    async def sync_view_counts(self) -> ViewCountSyncResult:
        """
        Flush cached view counts into storage.

        Writes the blog-wide statistic and adds the hit count of up to
        ``FLUSH_SIZE`` randomly chosen article pages to their articles, all in
        one transaction with query caching off. Hit counters are reset only
        after the commit, so a failed run leaves them for the next one.

        Returns:
            ViewCountSyncResult: ``flushed`` is False when no statistic is cached

        Raises:
            ServiceError: If storage fails; nothing from this run is written
        """
        statistic = await self.get_blog_statistic()
        if statistic is None:
            logger.debug("No cached blog statistic; nothing to flush")
            return ViewCountSyncResult()

        keys = self._sample_keys()
        article_label = PageType.ARTICLE.label
        flushed: dict[str, tuple[str, int]] = {}

        with get_tracer(__name__).start_as_current_span("sync_view_counts"):
            add_span_attributes({"sync.sampled_keys": len(keys)})
            try:
                with self.statistics.cache_disabled(), self.articles.cache_disabled():
                    async with atomic(self.session):
                        await self.statistics.update(statistic)

                        for key in keys:
                            page = self.page_cache.get(key)
                            if page is None or page.type != article_label:
                                continue
                            try:
                                article_id = UUID(page.oid)
                            except ValueError:
                                logger.warning("Cached page has a malformed id", key=key, oid=page.oid)
                                continue
                            article = await self.articles.get_by_id(article_id)
                            if article is None:
                                continue

                            hits = page.hit_count
                            article.view_count += hits
                            article.random_double = random()
                            await self.articles.update(article)
                            flushed[key] = (page.oid, hits)
            except RepositoryError as e:
                metrics_manager.record_view_sync_failure()
                logger.exception("Synchronizes view counts failed")
                raise ServiceError(get_label("updateFailLabel")) from e

        for key in flushed:
            self.page_cache.reset_hit_count(key)

        views = sum(hits for _, hits in flushed.values())
        metrics_manager.record_view_sync(len(flushed), views)
        logger.info(
            "Synchronized view counts",
            blog_view_count=statistic.blog_view_count,
            sampled=len(keys),
            articles=len(flushed),
            views=views,
        )
        return ViewCountSyncResult(
            flushed=True,
            sampled_keys=len(keys),
            articles=dict(flushed.values()),
        )
