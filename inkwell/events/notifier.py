from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inkwell.clients.http_client import HttpFetchClient
from inkwell.events.manager import EventListener
from inkwell.models import PreferenceDB
from inkwell.monitoring import get_logger
from inkwell.repositories import PreferenceRepository
from inkwell.utils.helpers import is_local_host

logger = get_logger(__name__)


class OutboundNotifier(EventListener):
    """
    Listener that notifies an external service over HTTP.

    Listeners outlive the request that fired them, so the preference is read
    through a fresh session.
    """

    def __init__(
        self,
        http_client: HttpFetchClient,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self.http_client = http_client
        self.session_factory = session_factory

    async def public_preference(self) -> PreferenceDB | None:
        """
        The blog preference, or None when notifications must be skipped.

        Skips installations served from a local host, and a missing preference.
        """
        async with self.session_factory() as session:
            preference = await PreferenceRepository(session).get_preference()
        if preference is None:
            logger.warning("Blog preference missing; skipping notification", listener=type(self).__name__)
            return None
        if is_local_host(preference.blog_host):
            logger.debug("Blog host is local; skipping notification", blog_host=preference.blog_host)
            return None
        return preference
