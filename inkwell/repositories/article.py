"""Article and comment repositories."""

from inkwell.models.article import ArticleDB, CommentDB
from inkwell.repositories.base import BaseRepository, QueryResult


class ArticleRepository(BaseRepository[ArticleDB]):
    """Repository for Article entities."""

    model = ArticleDB

    async def get_by_permalink(self, permalink: str) -> ArticleDB | None:
        return await self.get_by_field("permalink", permalink)

    async def published(self, page: int, page_size: int) -> QueryResult[ArticleDB]:
        """Published articles, newest first."""
        return await self.query(
            filters={"is_published": True},
            sort=[("created_at", True)],
            page=page,
            page_size=page_size,
        )


class CommentRepository(BaseRepository[CommentDB]):
    """Repository for Comment entities."""

    model = CommentDB
