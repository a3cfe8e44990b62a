"""
In-process event bus.

Write paths call ``EventManager.fire`` after their own commit. Each listener
registered for the event type runs in its own task; a listener failure is
logged and never reaches the publisher.
"""

from abc import ABC, abstractmethod
from asyncio import Task, create_task, gather
from collections import defaultdict
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from inkwell.monitoring import get_logger

logger = get_logger(__name__)


class EventTypes(StrEnum):
    UPDATE_ARTICLE = "updateArticle"
    ADD_COMMENT_TO_ARTICLE = "addCommentToArticle"


@dataclass(frozen=True)
class Event:
    type: EventTypes
    data: dict[str, Any] = field(default_factory=dict)


class EventListener(ABC):
    """Reacts to one event type."""

    event_type: EventTypes

    @abstractmethod
    async def action(self, event: Event) -> None: ...


class EventManager:
    """Dispatches events to registered listeners as detached tasks."""

    def __init__(self) -> None:
        self._listeners: defaultdict[EventTypes, list[EventListener]] = defaultdict(list)
        self._tasks: set[Task[None]] = set()

    def register(self, listener: EventListener) -> None:
        self._listeners[listener.event_type].append(listener)
        logger.debug(
            "Registered event listener",
            listener=type(listener).__name__,
            event_type=str(listener.event_type),
        )

    def listeners(self, event_type: EventTypes) -> list[EventListener]:
        return list(self._listeners.get(event_type, []))

    def fire(self, event: Event) -> None:
        """Schedule every listener of ``event.type`` and return immediately."""
        for listener in self.listeners(event.type):
            task = create_task(self._run(listener, event))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _run(self, listener: EventListener, event: Event) -> None:
        try:
            await listener.action(event)
        except Exception:
            logger.exception(
                "Event listener failed",
                listener=type(listener).__name__,
                event_type=str(event.type),
            )

    async def drain(self) -> None:
        """Wait for all listener tasks scheduled so far."""
        if self._tasks:
            await gather(*self._tasks)
