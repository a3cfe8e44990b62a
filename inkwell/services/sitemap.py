"""
Sitemap generation.

The document lists every published article (with ``lastmod``), every
navigation page, every tag plus the tag wall, and every archive month.
It is built completely or not at all.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import quote
from xml.etree import ElementTree as ET

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.configs import settings
from inkwell.errors import SitemapUnavailableError
from inkwell.monitoring import get_logger
from inkwell.repositories import (
    ArchiveDateRepository,
    ArticleRepository,
    PageRepository,
    TagRepository,
)
from inkwell.services.preference import PreferenceService
from inkwell.utils.helpers import blog_url, format_lastmod

if TYPE_CHECKING:
    from inkwell.managers.cache_manager import CacheManager

logger = get_logger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


@dataclass(frozen=True)
class SitemapURL:
    loc: str
    lastmod: str | None = None


@dataclass
class Sitemap:
    urls: list[SitemapURL] = field(default_factory=list)

    def add(self, loc: str, lastmod: str | None = None) -> None:
        self.urls.append(SitemapURL(loc=loc, lastmod=lastmod))

    def to_xml(self) -> str:
        """Serialize as a sitemaps.org ``urlset`` document."""
        urlset = ET.Element("urlset", xmlns=SITEMAP_NAMESPACE)
        for url in self.urls:
            node = ET.SubElement(urlset, "url")
            ET.SubElement(node, "loc").text = url.loc
            if url.lastmod is not None:
                ET.SubElement(node, "lastmod").text = url.lastmod
        body = ET.tostring(urlset, encoding="unicode")
        return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'


class SitemapService:
    """Aggregates articles, pages, tags and archives into a ``Sitemap``."""

    def __init__(
        self,
        session: AsyncSession,
        cache: "CacheManager | None" = None,
        page_size: int = settings.SITEMAP_PAGE_SIZE,
    ) -> None:
        self.preferences = PreferenceService(session)
        self.articles = ArticleRepository(session, cache)
        self.pages = PageRepository(session, cache)
        self.tags = TagRepository(session, cache)
        self.archive_dates = ArchiveDateRepository(session, cache)
        self.page_size = page_size

    async def build(self) -> Sitemap:
        """
        Build the sitemap.

        Returns:
            Sitemap: The complete document

        Raises:
            SitemapUnavailableError: If any part fails; no partial sitemap escapes
        """
        sitemap = Sitemap()
        try:
            preference = await self.preferences.get_preference()
            base = blog_url(preference.blog_host)
            await self._add_articles(sitemap, base)
            await self._add_navigations(sitemap, base)
            await self._add_tags(sitemap, base)
            await self._add_archives(sitemap, base)
        except Exception as e:
            logger.exception("Generates sitemap failed")
            raise SitemapUnavailableError from e

        logger.debug("Sitemap generated", urls=len(sitemap.urls))
        return sitemap

    async def _add_articles(self, sitemap: Sitemap, base: str) -> None:
        # the full result set is too large to keep in the query cache
        with self.articles.cache_disabled():
            page = 1
            while True:
                result = await self.articles.published(page, self.page_size)
                for article in result.results:
                    sitemap.add(base + article.permalink, format_lastmod(article.updated_at))
                if page >= result.page_count:
                    break
                page += 1

    async def _add_navigations(self, sitemap: Sitemap, base: str) -> None:
        for page in await self.pages.get_all(sort=[("position", False)]):
            # a navigation entry may be an external link
            if "://" in page.permalink:
                sitemap.add(page.permalink)
            else:
                sitemap.add(base + page.permalink)

    async def _add_tags(self, sitemap: Sitemap, base: str) -> None:
        for tag in await self.tags.get_all(sort=[("title", False)]):
            sitemap.add(f"{base}/tags/{quote(tag.title, safe='')}")
        sitemap.add(f"{base}/tags.html")

    async def _add_archives(self, sitemap: Sitemap, base: str) -> None:
        for archive in await self.archive_dates.get_all(sort=[("archive_time", True)]):
            sitemap.add(f"{base}/archives/{archive.archive_time:%Y/%m}")
