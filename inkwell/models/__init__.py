"""Database models for the application."""

from inkwell.models.article import ArticleDB, CommentDB
from inkwell.models.navigation import ArchiveDateDB, PageDB, TagDB
from inkwell.models.system import PreferenceDB, StatisticDB
from inkwell.models.user import UserDB

__all__ = [
    "ArchiveDateDB",
    "ArticleDB",
    "CommentDB",
    "PageDB",
    "PreferenceDB",
    "StatisticDB",
    "TagDB",
    "UserDB",
]
