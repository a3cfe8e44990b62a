from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.errors import ConfigurationUnavailableError, RepositoryError
from inkwell.models import PreferenceDB
from inkwell.monitoring import get_logger
from inkwell.repositories import PreferenceRepository

logger = get_logger(__name__)


class PreferenceService:
    """Read access to the blog preference."""

    def __init__(self, session: AsyncSession) -> None:
        self.preferences = PreferenceRepository(session)

    async def get_preference(self) -> PreferenceDB:
        """
        Load the blog preference.

        Raises:
            ConfigurationUnavailableError: If the row is missing or cannot be read
        """
        try:
            preference = await self.preferences.get_preference()
        except RepositoryError as e:
            logger.exception("Failed to load blog preference")
            raise ConfigurationUnavailableError from e
        if preference is None:
            logger.error("Blog preference row is missing")
            raise ConfigurationUnavailableError
        return preference
