"""Repository layer for database operations."""

from inkwell.repositories.article import ArticleRepository, CommentRepository
from inkwell.repositories.base import BaseRepository, QueryResult
from inkwell.repositories.navigation import (
    ArchiveDateRepository,
    PageRepository,
    TagRepository,
)
from inkwell.repositories.system import PreferenceRepository, StatisticRepository
from inkwell.repositories.user import UserRepository

__all__ = [
    "ArchiveDateRepository",
    "ArticleRepository",
    "BaseRepository",
    "CommentRepository",
    "PageRepository",
    "PreferenceRepository",
    "QueryResult",
    "StatisticRepository",
    "TagRepository",
    "UserRepository",
]
