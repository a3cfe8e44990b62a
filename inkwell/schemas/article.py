"""Article and comment schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl


class ArticleUpdate(BaseModel):
    """Article update (all fields optional). The permalink is fixed."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(default=None, alias="articleTitle", min_length=1, max_length=255)
    content: str | None = Field(default=None, alias="articleContent")
    tags: list[str] | None = Field(default=None, alias="articleTags")
    is_published: bool | None = Field(default=None, alias="articleIsPublished")


class ArticleResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID = Field(alias="oId")
    title: str = Field(alias="articleTitle")
    permalink: str = Field(alias="articlePermalink")
    content: str = Field(alias="articleContent")
    tags: list[str] = Field(alias="articleTags")
    view_count: int = Field(alias="articleViewCount")
    comment_count: int = Field(alias="articleCommentCount")
    created_at: datetime = Field(alias="articleCreateDate")
    updated_at: datetime = Field(alias="articleUpdateDate")


class CommentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="commentName", min_length=1, max_length=100)
    email: EmailStr = Field(alias="commentEmail")
    url: HttpUrl | None = Field(default=None, alias="commentURL")
    content: str = Field(alias="commentContent", min_length=2, max_length=2000)

