# tests/routes/test_blog_routes.py
"""Tests for the sitemap, article, comment and statistic routes."""

from collections.abc import Awaitable, Callable

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from inkwell.configs import PREFERENCE_ID
from inkwell.managers.page_cache import PageCache
from inkwell.models import ArticleDB, PreferenceDB, UserDB

ArticleFactory = Callable[..., Awaitable[ArticleDB]]


class TestSitemapRoute:
    @pytest.mark.asyncio
    async def test_sitemap_is_xml(self, client: AsyncClient, make_article: ArticleFactory) -> None:
        await make_article(permalink="/posts/1")

        response = await client.get("/sitemap.xml")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/xml")
        assert "<loc>http://localhost:8000/posts/1</loc>" in response.text
        assert "<lastmod>2013-01-18T10:00:00.000+00:00</lastmod>" in response.text

    @pytest.mark.asyncio
    async def test_sitemap_unavailable(self, client: AsyncClient, session: AsyncSession) -> None:
        preference = await session.get(PreferenceDB, PREFERENCE_ID)
        await session.delete(preference)
        await session.commit()

        response = await client.get("/sitemap.xml")

        assert response.status_code == 503
        assert "<urlset" not in response.text


class TestArticleRoutes:
    @pytest.mark.asyncio
    async def test_view_counts_and_sync(
        self,
        client: AsyncClient,
        page_cache: PageCache,
        make_article: ArticleFactory,
    ) -> None:
        article = await make_article(permalink="/posts/hello")

        for _ in range(3):
            response = await client.get("/articles/posts/hello")
            assert response.status_code == 200
        assert response.json()["articleTitle"] == article.title

        page = page_cache.get("/posts/hello")
        assert page is not None
        assert page.hit_count == 3

        online = await client.get("/console/stat/onlineVisitorRefresh")
        assert online.json() == {"onlineVisitorCount": 1}

        sync = await client.get("/console/stat/viewcnt")
        assert sync.json() == {
            "flushed": True,
            "sampledKeys": 1,
            "articles": {str(article.id): 3},
        }
        assert page.hit_count == 0

        reread = await client.get("/articles/posts/hello")
        assert reread.json()["articleViewCount"] == 3

    @pytest.mark.asyncio
    async def test_sync_without_views_is_a_no_op(self, client: AsyncClient) -> None:
        response = await client.get("/console/stat/viewcnt")

        assert response.json() == {"flushed": False, "sampledKeys": 0, "articles": {}}

    @pytest.mark.asyncio
    async def test_unknown_permalink(self, client: AsyncClient) -> None:
        response = await client.get("/articles/nope")

        assert response.status_code == 404
        assert response.json() == {"detail": "Not found"}

    @pytest.mark.asyncio
    async def test_author_or_admin_updates_article(
        self,
        client: AsyncClient,
        make_article: ArticleFactory,
        admin_headers: dict[str, str],
        user_headers: dict[str, str],
        regular_user: UserDB,
    ) -> None:
        own = await make_article(author_id=regular_user.id)
        other = await make_article()

        by_author = await client.put(
            f"/console/article/{own.id}",
            json={"articleTitle": "Mine"},
            headers=user_headers,
        )
        by_stranger = await client.put(
            f"/console/article/{other.id}",
            json={"articleTitle": "Not mine"},
            headers=user_headers,
        )
        by_admin = await client.put(
            f"/console/article/{other.id}",
            json={"articleTitle": "Edited"},
            headers=admin_headers,
        )

        assert by_author.json()["statusCode"] is True
        assert by_stranger.status_code == 403
        assert by_admin.json()["statusCode"] is True

    @pytest.mark.asyncio
    async def test_add_comment(self, client: AsyncClient, make_article: ArticleFactory) -> None:
        article = await make_article()

        response = await client.post(
            f"/articles/{article.id}/comments",
            json={
                "commentName": "Visitor",
                "commentEmail": "visitor@example.com",
                "commentContent": "Nice post",
            },
        )

        assert response.status_code == 201
        assert response.json()["msg"] == "Comment added"

    @pytest.mark.asyncio
    async def test_comment_too_short(self, client: AsyncClient, make_article: ArticleFactory) -> None:
        article = await make_article()

        response = await client.post(
            f"/articles/{article.id}/comments",
            json={"commentName": "V", "commentEmail": "v@example.com", "commentContent": "x"},
        )

        assert response.status_code == 422


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["cache"]["backend"] == "in-memory"
        assert response.headers["x-content-type-options"] == "nosniff"
