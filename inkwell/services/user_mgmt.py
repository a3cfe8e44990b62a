"""
Administrative user management.

Each operation runs in one transaction: the email uniqueness check and the
writes either all become durable or none do.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.configs import ADMIN_ROLE, DEFAULT_ROLE, get_label, settings
from inkwell.db import atomic
from inkwell.errors import (
    DuplicateEmailError,
    DuplicateEntryError,
    RepositoryError,
    ServiceError,
    UserNotFoundError,
)
from inkwell.managers.password_manager import hash_password
from inkwell.models import UserDB
from inkwell.monitoring import get_logger
from inkwell.repositories import UserRepository
from inkwell.utils.helpers import normalize_email

if TYPE_CHECKING:
    from inkwell.managers.cache_manager import CacheManager

logger = get_logger(__name__)


class UserMgmtService:
    """Create, update and remove user accounts."""

    def __init__(self, session: AsyncSession, cache: "CacheManager | None" = None) -> None:
        self.session = session
        self.users = UserRepository(session, cache)

    async def add_user(
        self,
        name: str,
        email: str,
        password: str,
        role: str | None = None,
    ) -> UUID:
        """
        Create a user.

        Args:
            name: Display name
            email: Email; trimmed and lower-cased before storage
            password: Plaintext password, stored as an argon2 hash
            role: Role; ``defaultRole`` when omitted

        Returns:
            UUID: The new user's id

        Raises:
            DuplicateEmailError: If a user already owns the email
            ServiceError: If persistence fails; nothing is written
        """
        email = normalize_email(email)
        password_hash = await hash_password(password)

        try:
            async with atomic(self.session):
                if await self.users.get_by_email(email) is not None:
                    raise DuplicateEmailError
                user = await self.users.add(
                    UserDB(
                        email=email,
                        name=name,
                        password_hash=password_hash,
                        role=role or DEFAULT_ROLE,
                        article_count=0,
                        published_article_count=0,
                    ),
                )
                user_id = user.id
        except DuplicateEntryError as e:
            # lost a race against a concurrent insert of the same email
            raise DuplicateEmailError from e
        except RepositoryError as e:
            logger.exception("Adds a user failed", email=email)
            raise ServiceError(get_label("updateFailLabel")) from e

        logger.info("User added", user_id=str(user_id), role=role or DEFAULT_ROLE)
        return user_id

    async def update_user(
        self,
        user_id: UUID,
        name: str,
        email: str,
        password: str,
    ) -> None:
        """
        Overwrite a user's email, name and password. The role is kept.

        Raises:
            UserNotFoundError: If no user has ``user_id``
            DuplicateEmailError: If another user owns the new email
            ServiceError: If persistence fails; nothing is written
        """
        email = normalize_email(email)
        password_hash = await hash_password(password)

        try:
            async with atomic(self.session):
                user = await self.users.get_by_id(user_id)
                if user is None:
                    raise UserNotFoundError
                if await self.users.email_taken(email, exclude_id=user_id):
                    raise DuplicateEmailError

                user.email = email
                user.name = name
                user.password_hash = password_hash
                user.updated_at = datetime.now(tz=UTC)
                await self.users.update(user)
        except DuplicateEntryError as e:
            raise DuplicateEmailError from e
        except RepositoryError as e:
            logger.exception("Updates a user failed", user_id=str(user_id))
            raise ServiceError(get_label("updateFailLabel")) from e

        logger.info("User updated", user_id=str(user_id))

    async def remove_user(self, user_id: UUID) -> bool:
        """
        Delete a user. Unknown ids are a no-op.

        Returns:
            bool: True if a user was deleted

        Raises:
            ServiceError: If the delete fails; nothing is removed
        """
        try:
            async with atomic(self.session):
                removed = await self.users.remove(user_id)
        except RepositoryError as e:
            logger.exception("Removes a user failed", user_id=str(user_id))
            raise ServiceError(get_label("removeFailLabel")) from e

        if removed:
            logger.info("User removed", user_id=str(user_id))
        return removed

    async def ensure_admin(self) -> UUID | None:
        """
        Create the first administrator from ``ADMIN_EMAIL``/``ADMIN_PASSWORD``.

        Does nothing when any user exists or the credentials are not configured.

        Returns:
            UUID | None: The administrator's id when one was created
        """
        if not settings.ADMIN_EMAIL or settings.ADMIN_PASSWORD is None:
            return None
        if await self.users.count() > 0:
            return None
        user_id = await self.add_user(
            settings.ADMIN_NAME,
            settings.ADMIN_EMAIL,
            settings.ADMIN_PASSWORD.get_secret_value(),
            ADMIN_ROLE,
        )
        logger.info("Created initial administrator", user_id=str(user_id))
        return user_id
