from inkwell.events.comment_sender import CommentSender, build_comment_payload
from inkwell.events.manager import Event, EventListener, EventManager, EventTypes
from inkwell.events.ping import UpdateArticleBlogSearchPinger, build_ping_url

__all__ = [
    "CommentSender",
    "Event",
    "EventListener",
    "EventManager",
    "EventTypes",
    "UpdateArticleBlogSearchPinger",
    "build_comment_payload",
    "build_ping_url",
]
