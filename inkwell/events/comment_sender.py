"""Mirrors new comments to the community comment service."""

from typing import Any

from orjson import dumps as orjson_dumps

from inkwell.clients.http_client import OutboundRequest
from inkwell.configs import settings
from inkwell.events.manager import Event, EventTypes
from inkwell.events.notifier import OutboundNotifier
from inkwell.models import PreferenceDB
from inkwell.monitoring import get_logger

logger = get_logger(__name__)


def build_comment_payload(comment: dict[str, Any], preference: PreferenceDB) -> dict[str, Any]:
    """
    Body of the comment mirror request.

    Args:
        comment: Event data with ``id``, ``name``, ``email``, ``content``, ``on_id``
        preference: Blog preference supplying the client metadata

    Returns:
        dict: JSON-ready payload
    """
    return {
        "comment": {
            "commentId": str(comment["id"]),
            "commentAuthorName": comment["name"],
            "commentAuthorEmail": comment["email"],
            "content": comment["content"],
            "articleId": str(comment["on_id"]),
        },
        "clientVersion": settings.VERSION,
        "clientRuntimeEnv": settings.RUNTIME_ENV,
        "clientName": settings.APP_NAME,
        "clientHost": preference.blog_host,
        "clientAdminEmail": preference.admin_email,
        "userB3Key": preference.installation_key,
    }


class CommentSender(OutboundNotifier):
    """PUTs each new article comment to the mirror endpoint."""

    event_type = EventTypes.ADD_COMMENT_TO_ARTICLE

    async def action(self, event: Event) -> None:
        preference = await self.public_preference()
        if preference is None:
            return

        payload = build_comment_payload(event.data["comment"], preference)
        self.http_client.fetch_async(
            OutboundRequest(
                url=settings.COMMENT_MIRROR_URL,
                method="PUT",
                payload=orjson_dumps(payload),
                headers={"Content-Type": "application/json"},
            ),
        )
        logger.debug("Comment mirrored", comment_id=payload["comment"]["commentId"])
