"""Business services. Each takes the request's session and the shared managers it needs."""

from inkwell.services.article import ArticleService
from inkwell.services.comment import CommentService
from inkwell.services.preference import PreferenceService
from inkwell.services.sitemap import Sitemap, SitemapService, SitemapURL
from inkwell.services.statistics import StatisticsService, ViewCountSyncResult
from inkwell.services.user_mgmt import UserMgmtService
from inkwell.services.user_query import UserPage, UserQueryService

__all__ = [
    "ArticleService",
    "CommentService",
    "PreferenceService",
    "Sitemap",
    "SitemapService",
    "SitemapURL",
    "StatisticsService",
    "UserMgmtService",
    "UserPage",
    "UserQueryService",
    "ViewCountSyncResult",
]
