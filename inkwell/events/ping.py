"""Blog search ping on article update."""

from urllib.parse import urlencode

from inkwell.clients.http_client import OutboundRequest
from inkwell.configs import settings
from inkwell.events.manager import Event, EventTypes
from inkwell.events.notifier import OutboundNotifier
from inkwell.monitoring import get_logger
from inkwell.utils.helpers import blog_url

logger = get_logger(__name__)


def build_ping_url(blog_title: str, blog_host: str, permalink: str) -> str:
    """
    Build the search engine ping URL for an updated article.

    Examples:
        >>> build_ping_url("My Blog", "example.com", "/posts/1")
        'http://blogsearch.google.com/ping?name=My+Blog&url=http%3A%2F%2Fexample.com&changesURL=http%3A%2F%2Fexample.com%2Fposts%2F1'
    """
    base = blog_url(blog_host)
    query = urlencode({"name": blog_title, "url": base, "changesURL": base + permalink})
    return f"{settings.BLOG_SEARCH_PING_URL}?{query}"


class UpdateArticleBlogSearchPinger(OutboundNotifier):
    """Pings the blog search service when an article changes."""

    event_type = EventTypes.UPDATE_ARTICLE

    async def action(self, event: Event) -> None:
        preference = await self.public_preference()
        if preference is None:
            return

        article = event.data["article"]
        url = build_ping_url(preference.blog_title, preference.blog_host, article["permalink"])
        logger.debug("Pinging blog search", article_id=article.get("id"), url=url)
        self.http_client.fetch_async(OutboundRequest(url=url, method="GET"))
