"""Article reads that feed the page cache, and article updates that publish events."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.configs import PageType
from inkwell.db import atomic
from inkwell.errors import ArticleNotFoundError
from inkwell.events import Event, EventManager, EventTypes
from inkwell.managers.page_cache import CachedPage, PageCache
from inkwell.models import ArticleDB
from inkwell.monitoring import get_logger
from inkwell.repositories import ArticleRepository

if TYPE_CHECKING:
    from inkwell.managers.cache_manager import CacheManager

logger = get_logger(__name__)


class ArticleService:
    def __init__(
        self,
        session: AsyncSession,
        page_cache: PageCache,
        events: EventManager,
        cache: "CacheManager | None" = None,
    ) -> None:
        self.session = session
        self.page_cache = page_cache
        self.events = events
        self.articles = ArticleRepository(session, cache)

    async def view_article(self, permalink: str) -> ArticleDB:
        """
        Resolve a published article by permalink and count the hit.

        The first view caches the page with one hit; later views increment
        the cached hit count.

        Raises:
            ArticleNotFoundError: If no published article has the permalink
        """
        article = await self.articles.get_by_permalink(permalink)
        if article is None or not article.is_published:
            raise ArticleNotFoundError

        if self.page_cache.record_hit(permalink) == 0:
            self.page_cache.put(
                CachedPage(
                    key=permalink,
                    type=PageType.ARTICLE.label,
                    oid=str(article.id),
                    title=article.title,
                    content=article.content,
                    hit_count=1,
                ),
            )
        return article

    async def update_article(
        self,
        article_id: UUID,
        title: str | None = None,
        content: str | None = None,
        tags: list[str] | None = None,
        is_published: bool | None = None,
    ) -> ArticleDB:
        """
        Update an article and publish ``updateArticle``.

        The cached page keeps its hit count; only its title and content are
        refreshed.

        Raises:
            ArticleNotFoundError: If the id does not resolve
        """
        async with atomic(self.session):
            article = await self.articles.get_by_id(article_id)
            if article is None:
                raise ArticleNotFoundError
            if title is not None:
                article.title = title
            if content is not None:
                article.content = content
            if tags is not None:
                article.tags = tags
            if is_published is not None:
                article.is_published = is_published
            article.updated_at = datetime.now(tz=UTC)
            article = await self.articles.update(article)

        cached = self.page_cache.get(article.permalink)
        if cached is not None:
            cached.title = article.title
            cached.content = article.content

        self.events.fire(
            Event(
                type=EventTypes.UPDATE_ARTICLE,
                data={
                    "article": {
                        "id": str(article.id),
                        "title": article.title,
                        "permalink": article.permalink,
                    },
                },
            ),
        )
        logger.info("Article updated", article_id=str(article.id))
        return article
