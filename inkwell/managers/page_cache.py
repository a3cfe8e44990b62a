"""
Rendered-page cache with per-entry hit counters.

Entries are keyed by request path and carry the localized label of their
page type, so consumers can tell article pages from tag or archive pages.
Methods never await, so each call is atomic with respect to the event loop.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import UTC, datetime

from inkwell.configs import settings
from inkwell.monitoring import get_logger

logger = get_logger(__name__)


@dataclass
class CachedPage:
    """A cached page and the number of hits it served since the last flush."""

    key: str
    type: str
    oid: str
    title: str
    content: str = ""
    hit_count: int = 0
    cached_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


class PageCache:
    """LRU map of ``CachedPage`` entries bounded by ``max_entries``."""

    def __init__(self, max_entries: int = settings.PAGE_CACHE_MAX_ENTRIES) -> None:
        self._pages: OrderedDict[str, CachedPage] = OrderedDict()
        self._max_entries = max_entries

    def __len__(self) -> int:
        return len(self._pages)

    def put(self, page: CachedPage) -> None:
        """Insert or replace an entry, evicting the least recently used one when full."""
        if page.key not in self._pages:
            while len(self._pages) >= self._max_entries:
                evicted, _ = self._pages.popitem(last=False)
                logger.debug("Evicted cached page", key=evicted)
        self._pages[page.key] = page
        self._pages.move_to_end(page.key)

    def get(self, key: str) -> CachedPage | None:
        page = self._pages.get(key)
        if page is not None:
            self._pages.move_to_end(key)
        return page

    def keys(self) -> set[str]:
        """Snapshot of the resident keys."""
        return set(self._pages)

    def remove(self, key: str) -> None:
        self._pages.pop(key, None)

    def clear(self) -> None:
        self._pages.clear()

    def record_hit(self, key: str) -> int:
        """
        Count one hit on ``key``.

        Returns:
            The new hit count, or 0 when the key is not cached.
        """
        page = self.get(key)
        if page is None:
            return 0
        page.hit_count += 1
        return page.hit_count

    def reset_hit_count(self, key: str) -> None:
        page = self._pages.get(key)
        if page is not None:
            page.hit_count = 0
