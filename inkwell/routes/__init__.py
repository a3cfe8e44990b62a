from inkwell.routes.article import router as article_router
from inkwell.routes.login import router as login_router
from inkwell.routes.sitemap import router as sitemap_router
from inkwell.routes.stat import router as stat_router
from inkwell.routes.user_console import router as user_console_router

__all__ = [
    "article_router",
    "login_router",
    "sitemap_router",
    "stat_router",
    "user_console_router",
]
