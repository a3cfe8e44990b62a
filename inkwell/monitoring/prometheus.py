"""
Prometheus metrics with cardinality protection.

HTTP request metrics come from prometheus-fastapi-instrumentator; the blog's
own counters (query cache, view-count synchronization, rate limiting and
outbound notifications) are declared here and fed by ``MetricsManager``.

Security
--------
- User ids, emails, client hosts and raw paths are never used as labels
- Label values are truncated and paths normalized before use
"""

from re import IGNORECASE, sub

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, generate_latest
from prometheus_fastapi_instrumentator import Instrumentator

from inkwell.configs import settings

METRICS_PREFIX = "inkwell"
PROMETHEUS_ENDPOINT = "/metrics/prometheus"
MAX_LABEL_VALUE_LENGTH: int = 1024

CACHE_REQUESTS = Counter(
    f"{METRICS_PREFIX}_query_cache_requests_total",
    "Repository query cache lookups",
    ["table", "result"],
)
VIEW_SYNC_RUNS = Counter(
    f"{METRICS_PREFIX}_view_sync_runs_total",
    "View count synchronizations by outcome",
    ["outcome"],
)
ARTICLES_FLUSHED = Counter(
    f"{METRICS_PREFIX}_view_sync_articles_total",
    "Articles whose buffered hits were written to storage",
)
VIEWS_FLUSHED = Counter(
    f"{METRICS_PREFIX}_view_sync_views_total",
    "Buffered article views written to storage",
)
RATE_LIMIT_HITS = Counter(
    f"{METRICS_PREFIX}_rate_limit_hits_total",
    "Requests rejected by the rate limiter",
    ["endpoint"],
)
OUTBOUND_FAILURES = Counter(
    f"{METRICS_PREFIX}_outbound_failures_total",
    "Best-effort notifications that failed",
)
SYSTEM_CPU_PERCENT = Gauge(f"{METRICS_PREFIX}_system_cpu_percent", "Current CPU usage percentage")
SYSTEM_MEMORY_PERCENT = Gauge(f"{METRICS_PREFIX}_system_memory_percent", "Current memory usage percentage")
SYSTEM_DISK_PERCENT = Gauge(f"{METRICS_PREFIX}_system_disk_percent", "Current disk usage percentage")


def sanitize_label_value(value: str) -> str:
    """Truncate a label value; empty values become ``unknown``."""
    if not value:
        return "unknown"
    return value[:MAX_LABEL_VALUE_LENGTH]


def normalize_path(path: str) -> str:
    """
    Replace ids in a path with placeholders.

    Examples
    --------
    >>> normalize_path("/console/user/550e8400-e29b-41d4-a716-446655440000")
    '/console/user/{uuid}'
    >>> normalize_path("/console/users/2/10/5")
    '/console/users/{id}/{id}/{id}'
    """
    path = sub(
        r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
        "{uuid}",
        path,
        flags=IGNORECASE,
    )
    return sub(r"/\d+(?=/|$)", "/{id}", path)


def record_cache_lookup(table: str, *, hit: bool) -> None:
    CACHE_REQUESTS.labels(table=sanitize_label_value(table), result="hit" if hit else "miss").inc()


def record_view_sync(articles: int, views: int) -> None:
    VIEW_SYNC_RUNS.labels(outcome="success").inc()
    ARTICLES_FLUSHED.inc(articles)
    VIEWS_FLUSHED.inc(views)


def record_view_sync_failure() -> None:
    VIEW_SYNC_RUNS.labels(outcome="failure").inc()


def record_rate_limit_hit(endpoint: str) -> None:
    RATE_LIMIT_HITS.labels(endpoint=sanitize_label_value(normalize_path(endpoint))).inc()


def record_outbound_failure() -> None:
    OUTBOUND_FAILURES.inc()


def update_system_metrics(cpu_percent: float, memory_percent: float, disk_percent: float) -> None:
    SYSTEM_CPU_PERCENT.set(cpu_percent)
    SYSTEM_MEMORY_PERCENT.set(memory_percent)
    SYSTEM_DISK_PERCENT.set(disk_percent)


def setup_metrics(app: FastAPI) -> Instrumentator:
    """
    Instrument ``app`` for HTTP request metrics and expose them.

    Does nothing when ``ENABLE_METRICS`` is off.

    Args:
        app: The FastAPI application instance.

    Returns:
        The configured Instrumentator.
    """
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_respect_env_var=False,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics.*", "/health"],
        inprogress_name=f"{METRICS_PREFIX}_http_requests_inprogress",
        inprogress_labels=True,
    )
    if settings.ENABLE_METRICS:
        instrumentator.instrument(app)
        instrumentator.expose(
            app,
            endpoint=PROMETHEUS_ENDPOINT,
            include_in_schema=False,
            tags=["📈 Metrics"],
        )
    return instrumentator


def generate_metrics_response() -> tuple[bytes, str]:
    """Prometheus exposition of the default registry, with its content type."""
    return generate_latest(), CONTENT_TYPE_LATEST
