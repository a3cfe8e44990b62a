"""
Article Routes.

Article views by permalink, article updates from the console, and visitor
comments.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from inkwell.configs import get_label
from inkwell.dependencies import (
    ArticleServiceDep,
    CommentServiceDep,
    StatisticsDep,
    UserDBDep,
)
from inkwell.errors import ForbiddenError
from inkwell.schemas import ArticleResponse, ArticleUpdate, CommentCreate, StatusResponse
from inkwell.services import UserQueryService
from inkwell.utils.helpers import host

router = APIRouter(tags=["📝 Articles"])

NOT_FOUND = {
    "description": "Not found",
    "content": {"application/json": {"example": {"detail": "Not found"}}},
}


@router.put(
    "/console/article/{article_id}",
    response_class=ORJSONResponse,
    response_model=StatusResponse,
    response_model_exclude_none=True,
    summary="Update an article",
    description="Update an article's title, content, tags or published flag.",
    responses={
        401: {"description": "Not logged in"},
        403: {"description": "Neither the author nor an administrator"},
        404: NOT_FOUND,
    },
    operation_id="console_update_article",
)
async def update_article(
    user: UserDBDep,
    article_id: Annotated[UUID, Path(description="Article id")],
    body: ArticleUpdate,
    articles: ArticleServiceDep,
) -> StatusResponse:
    """
    Update an article.

    Parameters
    ----------
    user : UserDB
        Session user; must be the author or an administrator.
    article_id : UUID
        Article to update.
    body : ArticleUpdate
        Fields to change.
    articles : ArticleService
        Article service.

    Returns
    -------
    StatusResponse
        Outcome envelope with the article id.
    """
    article = await articles.articles.get_by_id(article_id)
    if (
        article is not None
        and article.author_id != user.id
        and not UserQueryService.is_admin(user)
    ):
        raise ForbiddenError("Only the author or an administrator may edit this article")

    updated = await articles.update_article(
        article_id,
        title=body.title,
        content=body.content,
        tags=body.tags,
        is_published=body.is_published,
    )
    return StatusResponse(status_code=True, msg=get_label("updateSuccLabel"), id=updated.id)


@router.post(
    "/articles/{article_id}/comments",
    response_class=ORJSONResponse,
    response_model=StatusResponse,
    response_model_exclude_none=True,
    status_code=HTTP_201_CREATED,
    summary="Comment on an article",
    description="Add a visitor comment to a published article.",
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {
                        "statusCode": True,
                        "msg": "Comment added",
                        "oId": "123e4567-e89b-12d3-a456-426614174000",
                    },
                },
            },
        },
        404: NOT_FOUND,
    },
    operation_id="add_article_comment",
)
async def add_comment(
    article_id: Annotated[UUID, Path(description="Article id")],
    body: CommentCreate,
    comments: CommentServiceDep,
) -> StatusResponse:
    """
    Add a comment.

    Parameters
    ----------
    article_id : UUID
        Article being commented on.
    body : CommentCreate
        Commenter's name, email, optional URL and the comment text.
    comments : CommentService
        Comment service.

    Returns
    -------
    StatusResponse
        Envelope with the new comment's id.
    """
    comment = await comments.add_comment(
        article_id,
        name=body.name,
        email=str(body.email),
        content=body.content,
        url=str(body.url) if body.url else None,
    )
    return StatusResponse(status_code=True, msg=get_label("commentSuccLabel"), id=comment.id)


@router.get(
    "/articles/{permalink:path}",
    response_class=ORJSONResponse,
    response_model=ArticleResponse,
    summary="View article",
    description="Resolve a published article by its permalink and count the view.",
    responses={404: NOT_FOUND},
    operation_id="view_article",
)
async def view_article(
    request: Request,
    permalink: Annotated[str, Path(description="Article permalink without the leading slash")],
    articles: ArticleServiceDep,
    statistics: StatisticsDep,
) -> ArticleResponse:
    """
    View an article.

    Parameters
    ----------
    request : Request
        Incoming request, for the visitor address.
    permalink : str
        Site-relative permalink, e.g. ``hello-world.html``.
    articles : ArticleService
        Article service.
    statistics : StatisticsService
        View and visitor counters.

    Returns
    -------
    ArticleResponse
        The article.
    """
    article = await articles.view_article(f"/{permalink}")
    await statistics.inc_blog_view_count()
    await statistics.on_visit(host(request))
    return ArticleResponse.model_validate(article)
