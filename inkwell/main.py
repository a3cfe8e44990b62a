"""Inkwell - blog backend with cached view statistics and outbound notifications."""

from fastapi import FastAPI, Request, Response
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from inkwell.configs import settings
from inkwell.errors import (
    CacheExceptionError,
    ConfigurationUnavailableError,
    PasswordHashingError,
    RepositoryError,
    ServiceError,
    SitemapUnavailableError,
    UserAuthenticationError,
    auth_exception_handler,
    cache_exception_handler,
    password_hashing_exception_handler,
    repository_exception_handler,
    service_exception_handler,
)
from inkwell.managers.metrics import get_system_metrics, metrics_manager
from inkwell.managers.rate_limiter import limiter, rate_limit_exceeded_handler
from inkwell.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from inkwell.routes import (
    article_router,
    login_router,
    sitemap_router,
    stat_router,
    user_console_router,
)
from inkwell.monitoring.prometheus import setup_metrics
from inkwell.monitoring.tracing import configure_tracing
from inkwell.schemas import HealthCheckResponse
from inkwell.utils.helpers import today_str

app = FastAPI(
    title=settings.APP_NAME,
    description="Inkwell blog backend API",
    version=settings.VERSION,
    lifespan=lifespan,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

setup_metrics(app)
configure_tracing(app)

routes = [
    login_router,
    user_console_router,
    stat_router,
    sitemap_router,
    article_router,
]

_ = [app.include_router(router) for router in routes]

errors = [
    (CacheExceptionError, cache_exception_handler),
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (PasswordHashingError, password_hashing_exception_handler),
    (RepositoryError, repository_exception_handler),
    (ServiceError, service_exception_handler),
    (ConfigurationUnavailableError, service_exception_handler),
    (SitemapUnavailableError, service_exception_handler),
    (UserAuthenticationError, auth_exception_handler),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter
limiter: Limiter = app.state.limiter


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "version": "1.0.0",
                        "status": "ok",
                        "timestamp": "2026-01-01 12:00:00",
                        "pending_notifications": 0,
                        "cache": {"backend": "in-memory", "status": "healthy"},
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> HealthCheckResponse:
    """
    Health check endpoint.

    Parameters
    ----------
    request : Request
        Current request context.

    Returns
    -------
    HealthCheckResponse
        Version, cache backend health and outbound notifications in flight.
    """
    cache_health = await request.app.state.cache_manager.health_check()
    return HealthCheckResponse(
        version=app.version,
        status="ok" if cache_health.get("status") == "healthy" else "degraded",
        timestamp=today_str(),
        pending_notifications=request.app.state.http_client.pending,
        cache=cache_health,
    )


@app.get(
    "/metrics",
    tags=["📈 Metrics"],
    response_class=ORJSONResponse,
    summary="Get metrics",
    description="Get API performance, view count synchronization and system metrics.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "timestamp": "2026-01-01 12:00:00",
                        "api_metrics": {
                            "request_counts": {"GET /console/stat/viewcnt": 12},
                            "view_sync": {"runs": 12, "failures": 0, "articles_flushed": 40, "views_flushed": 315},
                        },
                        "system_metrics": {"cpu_percent": 4.2, "disk_percent": 31.0},
                    },
                },
            },
        },
        429: {
            "description": "Rate limit exceeded",
            "content": {"application/json": {"example": {"detail": "Too Many Requests"}}},
        },
    },
    operation_id="get_metrics",
)
@limiter.limit("5/minute")
async def get_metrics(request: Request, response: Response) -> ORJSONResponse:
    """
    Get API performance metrics.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Current response context.

    Returns
    -------
    ORJSONResponse
        Counters from the metrics manager and a system snapshot.

    Notes
    -----
    Rate limited to 5 requests per minute. Prometheus scrapes
    ``/metrics/prometheus`` instead.
    """
    return ORJSONResponse(
        content={
            "timestamp": today_str(),
            "api_metrics": metrics_manager.get_metrics(),
            "system_metrics": await get_system_metrics(),
        },
    )
