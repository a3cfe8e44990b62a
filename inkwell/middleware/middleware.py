"""
Middleware components for the Inkwell blog backend.

This module contains middleware for security headers, request logging and
CORS handling, and the lifespan handler that starts and stops the shared
services kept on ``app.state``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from inkwell.clients.http_client import HttpFetchClient
from inkwell.configs import settings
from inkwell.db import async_session_maker, close_db, init_db, transaction
from inkwell.events import CommentSender, EventManager, UpdateArticleBlogSearchPinger
from inkwell.managers.cache_manager import CacheManager
from inkwell.managers.page_cache import PageCache
from inkwell.monitoring import bind_request_id, clear_context, configure_logging, get_logger
from inkwell.monitoring.tracing import shutdown_tracing
from inkwell.services import UserMgmtService
from inkwell.utils.helpers import get_summary, host

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Manage application startup and shutdown events with service initialization."""
    configure_logging()
    logger.info(f"Starting {app.title}...")

    try:
        await init_db()
        async with transaction() as session:
            await UserMgmtService(session).ensure_admin()

        cache_manager = CacheManager()
        await cache_manager.initialize()
        app.state.cache_manager = cache_manager

        app.state.page_cache = PageCache()

        http_client = HttpFetchClient()
        await http_client.start()
        app.state.http_client = http_client

        event_manager = EventManager()
        event_manager.register(UpdateArticleBlogSearchPinger(http_client, async_session_maker))
        event_manager.register(CommentSender(http_client, async_session_maker))
        app.state.event_manager = event_manager

        logger.info("Services initialized successfully")
        logger.info(f"  - Blog: {settings.SERVE_PATH}")
        logger.info(f"  - API Documentation: {settings.SERVE_PATH}/docs")
        logger.info(f"  - Health Check: {settings.SERVE_PATH}/health")

    except Exception:
        logger.exception("Failed to initialize services")
        raise

    yield

    logger.info(f"Shutting down {app.title}...")

    try:
        await event_manager.drain()
        await http_client.close()
        await cache_manager.shutdown()
        await close_db()
        shutdown_tracing()
        logger.info("Services cleaned up successfully")

    except Exception:
        logger.exception("Error during service cleanup")


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware for the application."""
    allowed_origins: list[str] = [settings.SERVE_PATH]
    if settings.ENVIRONMENT == "development":
        allowed_origins += ["http://localhost:3000", "http://127.0.0.1:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request summary and timing, tagged with a request id."""

        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        bind_request_id(request_id)
        start_time = perf_counter()
        route_info = get_summary(request) or f"{request.method} {request.url.path}"
        logger.info(f"Request: {route_info}", client=host(request))

        try:
            response = await call_next(request)
        finally:
            clear_context()
        duration = perf_counter() - start_time

        logger.info(
            f"Response: {response.status_code} for {request.method} {request.url.path}",
            duration=f"{duration:.3f}s",
            request_id=request_id,
        )
        response.headers["X-Request-ID"] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Add security headers to all responses."""

        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if settings.ENVIRONMENT == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response
