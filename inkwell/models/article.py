"""Article and comment database models."""

from datetime import UTC, datetime
from random import random
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import JSON, DateTime, Index, Text
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String


class ArticleDB(SQLModel, table=True):
    """
    Article database model.

    ``random_double`` is re-stamped whenever the view count is flushed and
    serves as a tie-break for random ordering.
    """

    __tablename__ = cast("declared_attr[str]", "articles")

    __table_args__ = (
        Index("ix_articles_published_created", "is_published", "created_at"),
    )

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Article ID",
    )

    author_id: UUID | None = Field(
        default=None,
        sa_column=Column(
            "author_id",
            ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
        description="Author ID (foreign key to users.id)",
    )

    title: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Article title",
    )
    permalink: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="Site-relative permalink, e.g. /articles/2013/01/18/hello.html",
    )
    content: str = Field(
        default="",
        sa_column=Column(Text, nullable=False),
        description="Article content",
    )
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Tag titles",
    )
    is_published: bool = Field(default=False, nullable=False)

    view_count: int = Field(default=0, nullable=False)
    comment_count: int = Field(default=0, nullable=False)
    random_double: float = Field(default_factory=random, nullable=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "title": "Hello World",
                "permalink": "/posts/1",
                "is_published": True,
                "view_count": 0,
                "tags": ["inkwell"],
            },
        },
    )


class CommentDB(SQLModel, table=True):
    """Comment on an article."""

    __tablename__ = cast("declared_attr[str]", "comments")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)

    on_id: UUID = Field(
        sa_column=Column(
            "on_id",
            ForeignKey("articles.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Commented article ID",
    )
    name: str = Field(sa_column=Column(String(100), nullable=False))
    email: str = Field(sa_column=Column(String(255), nullable=False))
    url: str | None = Field(default=None, sa_column=Column(String(500)))
    content: str = Field(sa_column=Column(Text, nullable=False))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
