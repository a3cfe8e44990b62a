from inkwell.dependencies.dependencies import (
    ArticleServiceDep,
    CacheDep,
    CommentServiceDep,
    EventsDep,
    OptionalUserDep,
    PageCacheDep,
    PreferenceDep,
    SessionDep,
    SitemapDep,
    StatisticsDep,
    UserDBDep,
    UserMgmtDep,
    UserQueryDep,
    get_current_user,
    get_optional_user,
)

__all__ = [
    "ArticleServiceDep",
    "CacheDep",
    "CommentServiceDep",
    "EventsDep",
    "OptionalUserDep",
    "PageCacheDep",
    "PreferenceDep",
    "SessionDep",
    "SitemapDep",
    "StatisticsDep",
    "UserDBDep",
    "UserMgmtDep",
    "UserQueryDep",
    "get_current_user",
    "get_optional_user",
]
