"""Singleton rows: blog-wide statistic and blog preference."""

from typing import cast

from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from inkwell.configs import PREFERENCE_ID, STATISTIC_ID


class StatisticDB(SQLModel, table=True):
    """Blog-wide counters. Exactly one row, keyed ``statistic``."""

    __tablename__ = cast("declared_attr[str]", "statistics")

    id: str = Field(default=STATISTIC_ID, primary_key=True, max_length=32)
    blog_view_count: int = Field(default=0, nullable=False)
    blog_article_count: int = Field(default=0, nullable=False)
    blog_published_article_count: int = Field(default=0, nullable=False)
    blog_comment_count: int = Field(default=0, nullable=False)


class PreferenceDB(SQLModel, table=True):
    """Blog preference. Exactly one row, keyed ``preference``."""

    __tablename__ = cast("declared_attr[str]", "preferences")

    id: str = Field(default=PREFERENCE_ID, primary_key=True, max_length=32)
    blog_host: str = Field(sa_column=Column(String(255), nullable=False))
    blog_title: str = Field(sa_column=Column(String(255), nullable=False))
    blog_subtitle: str = Field(default="", sa_column=Column(String(255), nullable=False))
    admin_email: str = Field(default="", sa_column=Column(String(255), nullable=False))
    installation_key: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False),
    )
    locale: str = Field(default="en_US", sa_column=Column(String(10), nullable=False))
