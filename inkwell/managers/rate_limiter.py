"""Rate limiter configuration using slowapi."""

from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from inkwell.configs import settings
from inkwell.managers.metrics import metrics_manager
from inkwell.monitoring import get_logger

logger = get_logger(__name__)


def get_identifier(request: Request) -> str:
    """Rate limit key: the client address."""
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_identifier,
    storage_uri="memory://",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Return 429 with the limit that was hit."""
    http_exc = cast(RateLimitExceeded, exc)
    logger.warning("Rate limit exceeded", path=request.url.path, limit=http_exc.detail)
    metrics_manager.record_rate_limit_hit(request.url.path)
    return ORJSONResponse(
        status_code=HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": "Rate limit exceeded", "allowed_requests": http_exc.detail},
    )
