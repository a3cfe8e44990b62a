"""
Metrics and monitoring service for tracking API performance.

This module provides thread-safe metrics collection for request counts,
response times, error rates and the blog's own counters: query cache
lookups, view count synchronizations, rate limit hits and failed outbound
notifications. Every counter is mirrored into the Prometheus collectors of
``inkwell.monitoring.prometheus``.

Features:
    - Thread-safe counters using threading.Lock
    - Memory-efficient circular buffer using deque for response times
    - Async context manager support for request timing
    - System metrics collection (CPU, memory, disk)
"""

from asyncio import to_thread
from collections import defaultdict, deque
from dataclasses import dataclass, field
from threading import Lock
from time import perf_counter
from types import TracebackType
from typing import Any, Self

from psutil import cpu_percent as get_cpu_percent
from psutil import disk_usage, virtual_memory

from inkwell.monitoring import get_logger
from inkwell.monitoring.prometheus import (
    record_cache_lookup,
    record_outbound_failure,
    record_rate_limit_hit,
    record_view_sync,
    record_view_sync_failure,
    update_system_metrics,
)

logger = get_logger(__name__)

_BYTES_PER_MB: int = 1024 * 1024
_MAX_RESPONSE_TIMES: int = 1000
_CPU_SAMPLE_INTERVAL: float = 0.1


@dataclass(slots=True)
class ResponseTimeStats:
    """
    Statistics for response times with O(1) operations.

    Uses deque for automatic circular buffer behavior. Keeps a running sum
    for O(1) average computation.
    """

    times: deque[float] = field(default_factory=lambda: deque(maxlen=_MAX_RESPONSE_TIMES))
    _sum: float = field(default=0.0, repr=False)

    def add(self, duration: float) -> None:
        if len(self.times) == self.times.maxlen:
            # oldest value leaves the sum before the deque drops it
            self._sum -= self.times[0]
        self.times.append(duration)
        self._sum += duration

    @property
    def average(self) -> float:
        return self._sum / len(self.times) if self.times else 0.0

    @property
    def count(self) -> int:
        return len(self.times)

    def clear(self) -> None:
        self.times.clear()
        self._sum = 0.0


@dataclass(slots=True)
class ViewSyncStats:
    """Totals across view count synchronizations."""

    runs: int = 0
    failures: int = 0
    articles_flushed: int = 0
    views_flushed: int = 0


class MetricsManager:
    """
    Thread-safe metrics collector for API performance tracking.

    All counter operations are protected by a lock.
    """

    __slots__ = (
        "_cache_hits",
        "_cache_misses",
        "_error_counts",
        "_lock",
        "_outbound_failures",
        "_rate_limit_hits",
        "_request_counts",
        "_response_times",
        "_view_sync",
    )

    def __init__(self) -> None:
        self._lock = Lock()
        self._request_counts: dict[str, int] = defaultdict(int)
        self._error_counts: dict[str, int] = defaultdict(int)
        self._response_times: dict[str, ResponseTimeStats] = defaultdict(ResponseTimeStats)
        self._cache_hits: int = 0
        self._cache_misses: int = 0
        self._rate_limit_hits: int = 0
        self._outbound_failures: int = 0
        self._view_sync = ViewSyncStats()

    def record_request(self, endpoint: str) -> None:
        with self._lock:
            self._request_counts[endpoint] += 1

    def record_error(self, endpoint: str) -> None:
        with self._lock:
            self._error_counts[endpoint] += 1

    def record_response_time(self, endpoint: str, duration: float) -> None:
        """
        Record response time for an endpoint (thread-safe).

        Args:
            endpoint: API endpoint path.
            duration: Response time in seconds.
        """
        with self._lock:
            self._response_times[endpoint].add(duration)

    def record_cache_hit(self, table: str) -> None:
        with self._lock:
            self._cache_hits += 1
        record_cache_lookup(table, hit=True)

    def record_cache_miss(self, table: str) -> None:
        with self._lock:
            self._cache_misses += 1
        record_cache_lookup(table, hit=False)

    def record_rate_limit_hit(self, endpoint: str) -> None:
        with self._lock:
            self._rate_limit_hits += 1
        record_rate_limit_hit(endpoint)

    def record_outbound_failure(self) -> None:
        with self._lock:
            self._outbound_failures += 1
        record_outbound_failure()

    def record_view_sync(self, articles: int, views: int) -> None:
        """
        Record a committed view count synchronization (thread-safe).

        Args:
            articles: Articles whose hit counts were written.
            views: Sum of the hit counts written.
        """
        with self._lock:
            self._view_sync.runs += 1
            self._view_sync.articles_flushed += articles
            self._view_sync.views_flushed += views
        record_view_sync(articles, views)

    def record_view_sync_failure(self) -> None:
        with self._lock:
            self._view_sync.failures += 1
        record_view_sync_failure()

    def get_metrics(self) -> dict[str, Any]:
        """
        Get current metrics summary (thread-safe snapshot).

        Returns:
            Dictionary containing all metrics with computed statistics.
        """
        with self._lock:
            avg_response_times = {
                endpoint: stats.average
                for endpoint, stats in self._response_times.items()
                if stats.count > 0
            }

            total_cache = self._cache_hits + self._cache_misses
            cache_hit_rate = (self._cache_hits / total_cache * 100) if total_cache > 0 else 0.0

            return {
                "request_counts": dict(self._request_counts),
                "error_counts": dict(self._error_counts),
                "avg_response_times": avg_response_times,
                "cache_stats": {
                    "hits": self._cache_hits,
                    "misses": self._cache_misses,
                    "hit_rate": f"{cache_hit_rate:.2f}%",
                },
                "view_sync": {
                    "runs": self._view_sync.runs,
                    "failures": self._view_sync.failures,
                    "articles_flushed": self._view_sync.articles_flushed,
                    "views_flushed": self._view_sync.views_flushed,
                },
                "rate_limit_hits": self._rate_limit_hits,
                "outbound_failures": self._outbound_failures,
            }

    def reset_metrics(self) -> None:
        """Reset all metrics (thread-safe). Prometheus counters keep counting."""
        with self._lock:
            self._request_counts.clear()
            self._error_counts.clear()
            self._response_times.clear()
            self._cache_hits = 0
            self._cache_misses = 0
            self._rate_limit_hits = 0
            self._outbound_failures = 0
            self._view_sync = ViewSyncStats()
        logger.info("Metrics reset")


metrics_manager = MetricsManager()


class RequestTimer:
    """
    Context manager for timing requests with automatic metrics recording.

    Supports both sync and async usage patterns.
    """

    __slots__ = ("_endpoint", "_metrics", "_start_time")

    def __init__(
        self,
        endpoint: str,
        metrics: MetricsManager | None = None,
    ) -> None:
        """
        Initialize request timer.

        Args:
            endpoint: API endpoint path.
            metrics: Optional metrics manager (defaults to global instance).
        """
        self._endpoint = endpoint
        self._start_time: float = 0.0
        self._metrics = metrics or metrics_manager

    def __enter__(self) -> Self:
        self._start_time = perf_counter()
        self._metrics.record_request(self._endpoint)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        duration = perf_counter() - self._start_time
        self._metrics.record_response_time(self._endpoint, duration)

        if exc_type is not None:
            self._metrics.record_error(self._endpoint)

    async def __aenter__(self) -> Self:
        return self.__enter__()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)

    @property
    def elapsed(self) -> float:
        return perf_counter() - self._start_time if self._start_time else 0.0


@dataclass(slots=True, frozen=True)
class SystemMetrics:
    """Immutable system metrics snapshot."""

    cpu_percent: float
    memory_percent: float
    memory_used_mb: float
    memory_total_mb: float
    disk_percent: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "cpu_percent": self.cpu_percent,
            "memory": {
                "percent": self.memory_percent,
                "used_mb": self.memory_used_mb,
                "total_mb": self.memory_total_mb,
            },
            "disk_percent": self.disk_percent,
        }


async def get_system_metrics() -> dict[str, Any]:
    """
    Get system-level metrics and update the Prometheus gauges.

    The blocking psutil calls run in a worker thread.

    Returns:
        Dictionary containing system metrics or error information.
    """

    def _collect_metrics() -> SystemMetrics:
        memory = virtual_memory()
        disk = disk_usage("/")
        return SystemMetrics(
            cpu_percent=get_cpu_percent(interval=_CPU_SAMPLE_INTERVAL),
            memory_percent=memory.percent,
            memory_used_mb=round(memory.used / _BYTES_PER_MB, 2),
            memory_total_mb=round(memory.total / _BYTES_PER_MB, 2),
            disk_percent=disk.percent,
        )

    try:
        system_metrics = await to_thread(_collect_metrics)
    except OSError as e:
        logger.exception("Failed to get system metrics: OS error")
        return {"error": f"Failed to collect system metrics: {e}"}
    except Exception:
        logger.exception("Failed to get system metrics: unexpected error")
        return {"error": "Failed to collect system metrics"}

    update_system_metrics(
        system_metrics.cpu_percent,
        system_metrics.memory_percent,
        system_metrics.disk_percent,
    )
    return system_metrics.to_dict()
