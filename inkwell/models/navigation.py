"""Pages, tags and archive dates: everything the sitemap links besides articles."""

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String


class PageDB(SQLModel, table=True):
    """Navigation page. ``permalink`` may be an absolute external URL."""

    __tablename__ = cast("declared_attr[str]", "pages")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    title: str = Field(sa_column=Column(String(255), nullable=False))
    permalink: str = Field(sa_column=Column(String(500), nullable=False))
    position: int = Field(default=0, nullable=False)


class TagDB(SQLModel, table=True):
    """Tag with reference counters."""

    __tablename__ = cast("declared_attr[str]", "tags")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    title: str = Field(
        sa_column=Column(String(100), unique=True, nullable=False, index=True),
    )
    reference_count: int = Field(default=0, nullable=False)
    published_reference_count: int = Field(default=0, nullable=False)


class ArchiveDateDB(SQLModel, table=True):
    """Month bucket of articles; ``archive_time`` is the first instant of the month."""

    __tablename__ = cast("declared_attr[str]", "archive_dates")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    archive_time: datetime = Field(
        sa_column=Column(DateTime(timezone=True), unique=True, nullable=False),
    )
    article_count: int = Field(default=0, nullable=False)
    published_article_count: int = Field(default=0, nullable=False)
