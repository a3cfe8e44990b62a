from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.db import atomic
from inkwell.errors import ArticleNotFoundError
from inkwell.events import Event, EventManager, EventTypes
from inkwell.models import CommentDB
from inkwell.monitoring import get_logger
from inkwell.repositories import ArticleRepository, CommentRepository

logger = get_logger(__name__)


class CommentService:
    def __init__(self, session: AsyncSession, events: EventManager) -> None:
        self.session = session
        self.events = events
        self.articles = ArticleRepository(session)
        self.comments = CommentRepository(session)

    async def add_comment(
        self,
        article_id: UUID,
        name: str,
        email: str,
        content: str,
        url: str | None = None,
    ) -> CommentDB:
        """
        Store a comment on a published article, then publish ``addCommentToArticle``.

        Listeners run after the commit; they cannot undo the comment.

        Raises:
            ArticleNotFoundError: If the article does not exist or is unpublished
        """
        async with atomic(self.session):
            article = await self.articles.get_by_id(article_id)
            if article is None or not article.is_published:
                raise ArticleNotFoundError
            comment = await self.comments.add(
                CommentDB(on_id=article_id, name=name, email=email, url=url, content=content),
            )
            article.comment_count += 1
            await self.articles.update(article)

        self.events.fire(
            Event(
                type=EventTypes.ADD_COMMENT_TO_ARTICLE,
                data={
                    "comment": {
                        "id": str(comment.id),
                        "name": comment.name,
                        "email": comment.email,
                        "content": comment.content,
                        "on_id": str(comment.on_id),
                    },
                },
            ),
        )
        logger.info("Comment added", comment_id=str(comment.id), article_id=str(article_id))
        return comment
