"""
Outbound HTTP for best-effort notifications.

``fetch_async`` schedules the request on the running loop and returns
immediately; failures are logged and dropped.
"""

from asyncio import Task, create_task, gather
from dataclasses import dataclass, field
from typing import Literal

from httpx import AsyncClient, HTTPError, InvalidURL, Response

from inkwell.configs import settings
from inkwell.managers.metrics import metrics_manager
from inkwell.monitoring import get_logger
from inkwell.monitoring.tracing import get_tracer

logger = get_logger(__name__)


@dataclass(frozen=True)
class OutboundRequest:
    url: str
    method: Literal["GET", "POST", "PUT"] = "GET"
    payload: bytes | None = None
    headers: dict[str, str] = field(default_factory=dict)


class HttpFetchClient:
    """Shared ``httpx.AsyncClient`` plus bookkeeping for detached requests."""

    def __init__(self, client: AsyncClient | None = None) -> None:
        self._client = client
        self._tasks: set[Task[None]] = set()

    async def start(self) -> None:
        if self._client is None:
            self._client = AsyncClient(
                timeout=settings.OUTBOUND_TIMEOUT,
                headers={"User-Agent": f"{settings.APP_NAME}/{settings.VERSION}"},
            )
            logger.info("Outbound HTTP client started")

    async def close(self) -> None:
        """Wait for pending requests, then close the connection pool."""
        await self.drain()
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Outbound HTTP client closed")

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def fetch(self, request: OutboundRequest) -> Response:
        """
        Send ``request`` and wait for the response.

        Raises:
            HTTPError: On transport failure or a non-2xx status
            InvalidURL: If ``request.url`` cannot be parsed
        """
        if self._client is None:
            await self.start()
        with get_tracer(__name__).start_as_current_span("outbound_request") as span:
            span.set_attribute("http.request.method", request.method)
            response = await self._client.request(  # type: ignore[union-attr]
                request.method,
                request.url,
                content=request.payload,
                headers=request.headers,
            )
            span.set_attribute("http.response.status_code", response.status_code)
            response.raise_for_status()
        return response

    def fetch_async(self, request: OutboundRequest) -> None:
        """Send ``request`` in the background. No result, no retry."""
        task = create_task(self._fetch_quietly(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _fetch_quietly(self, request: OutboundRequest) -> None:
        try:
            response = await self.fetch(request)
        except (HTTPError, InvalidURL) as e:
            logger.warning("Outbound request failed", method=request.method, url=request.url, error=str(e))
            metrics_manager.record_outbound_failure()
            return
        except Exception:
            logger.exception("Outbound request failed unexpectedly", method=request.method, url=request.url)
            metrics_manager.record_outbound_failure()
            return
        logger.debug(
            "Outbound request sent",
            method=request.method,
            url=request.url,
            status=response.status_code,
        )

    async def drain(self) -> None:
        if self._tasks:
            await gather(*self._tasks, return_exceptions=True)
