"""Read-side user operations and credential checks."""

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.configs import ADMIN_ROLE
from inkwell.managers.password_manager import verify_password
from inkwell.models import UserDB
from inkwell.monitoring import get_logger
from inkwell.repositories import UserRepository
from inkwell.utils.helpers import paginate

if TYPE_CHECKING:
    from inkwell.managers.cache_manager import CacheManager

logger = get_logger(__name__)


@dataclass
class UserPage:
    users: list[UserDB]
    page_count: int
    page_nums: list[int]


class UserQueryService:
    def __init__(self, session: AsyncSession, cache: "CacheManager | None" = None) -> None:
        self.users = UserRepository(session, cache)

    async def get_user(self, user_id: UUID) -> UserDB | None:
        return await self.users.get_by_id(user_id)

    async def get_users(self, page: int, page_size: int, window_size: int) -> UserPage:
        """
        One page of users plus the page numbers to show around it.

        Args:
            page: 1-based page number
            page_size: Users per page
            window_size: Number of page links in the pagination window
        """
        result = await self.users.list_users(page, page_size)
        return UserPage(
            users=result.results,
            page_count=result.page_count,
            page_nums=paginate(page, result.page_count, window_size),
        )

    async def authenticate(self, email: str, password: str) -> UserDB | None:
        """
        Check credentials.

        Returns:
            UserDB | None: The user when the password matches, else None
        """
        user = await self.users.get_by_email(email)
        if not await verify_password(password, user.password_hash if user else None):
            logger.info("Login rejected", email=email)
            return None
        return user

    @staticmethod
    def is_admin(user: UserDB) -> bool:
        return user.role == ADMIN_ROLE
