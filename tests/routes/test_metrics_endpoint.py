# tests/routes/test_metrics_endpoint.py
"""Tests for the metrics endpoints and route timing."""

from collections.abc import Awaitable, Callable, Generator

import pytest
from httpx import AsyncClient

from inkwell.managers.metrics import metrics_manager
from inkwell.managers.page_cache import PageCache
from inkwell.models import ArticleDB

ArticleFactory = Callable[..., Awaitable[ArticleDB]]


@pytest.fixture
def fresh_metrics() -> Generator[None]:
    metrics_manager.reset_metrics()
    yield
    metrics_manager.reset_metrics()


@pytest.mark.asyncio
@pytest.mark.usefixtures("fresh_metrics")
async def test_view_sync_shows_in_metrics(
    client: AsyncClient,
    page_cache: PageCache,
    make_article: ArticleFactory,
) -> None:
    await make_article(permalink="/posts/hello")
    for _ in range(3):
        await client.get("/articles/posts/hello")
    assert page_cache.get("/posts/hello") is not None

    await client.get("/console/stat/viewcnt")
    response = await client.get("/metrics")

    assert response.status_code == 200
    body = response.json()
    api = body["api_metrics"]
    assert api["request_counts"]["GET /console/stat/viewcnt"] == 1
    assert "GET /console/stat/viewcnt" in api["avg_response_times"]
    assert api["view_sync"] == {"runs": 1, "failures": 0, "articles_flushed": 1, "views_flushed": 3}
    assert "system_metrics" in body


@pytest.mark.asyncio
@pytest.mark.usefixtures("fresh_metrics")
async def test_console_and_sitemap_routes_are_timed(
    client: AsyncClient,
    admin_headers: dict[str, str],
) -> None:
    await client.get("/console/users/1/10/5", headers=admin_headers)
    await client.get("/sitemap.xml")

    counts = metrics_manager.get_metrics()["request_counts"]

    assert counts["GET /console/users/{page}/{size}/{window}"] == 1
    assert counts["GET /sitemap.xml"] == 1


@pytest.mark.asyncio
async def test_prometheus_exposition(client: AsyncClient) -> None:
    await client.get("/console/stat/viewcnt")

    response = await client.get("/metrics/prometheus")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "inkwell_view_sync_runs_total" in response.text
