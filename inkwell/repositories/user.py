"""User repository for database operations."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from inkwell.models.user import UserDB
from inkwell.repositories.base import BaseRepository, QueryResult
from inkwell.utils.helpers import normalize_email


class UserRepository(BaseRepository[UserDB]):
    """Repository for User entities."""

    model = UserDB

    async def get_by_email(self, email: str) -> UserDB | None:
        """Look a user up by email, ignoring case and surrounding whitespace."""
        return await self.get_by_field("email", normalize_email(email))

    async def email_taken(self, email: str, exclude_id: UUID | None = None) -> bool:
        """
        Check whether a user other than ``exclude_id`` owns ``email``.

        Args:
            email: Email to check; normalized before comparison
            exclude_id: User allowed to own the email (for updates)

        Returns:
            bool: True if another user owns it
        """
        statement = select(UserDB.id).where(UserDB.email == normalize_email(email))
        if exclude_id is not None:
            statement = statement.where(UserDB.id != exclude_id)
        try:
            result = await self.session.execute(statement.limit(1))
        except SQLAlchemyError as e:
            raise self._wrap(e, "email_taken") from e
        return result.scalar_one_or_none() is not None

    async def list_users(self, page: int, page_size: int) -> QueryResult[UserDB]:
        """Users ordered by creation time, newest first."""
        return await self.query(sort=[("created_at", True)], page=page, page_size=page_size)
