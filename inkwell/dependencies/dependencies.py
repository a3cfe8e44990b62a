"""Application dependencies: shared managers, services and the session user."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.configs import settings
from inkwell.db import get_session
from inkwell.errors import NotAuthenticatedError
from inkwell.events import EventManager
from inkwell.managers.cache_manager import CacheManager
from inkwell.managers.page_cache import PageCache
from inkwell.managers.token_manager import decode_session_token
from inkwell.models import UserDB
from inkwell.repositories import UserRepository
from inkwell.services import (
    ArticleService,
    CommentService,
    PreferenceService,
    SitemapService,
    StatisticsService,
    UserMgmtService,
    UserQueryService,
)

bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_cache_manager(request: Request) -> CacheManager:
    return request.app.state.cache_manager


def get_page_cache(request: Request) -> PageCache:
    return request.app.state.page_cache


def get_event_manager(request: Request) -> EventManager:
    return request.app.state.event_manager


CacheDep = Annotated[CacheManager, Depends(get_cache_manager)]
PageCacheDep = Annotated[PageCache, Depends(get_page_cache)]
EventsDep = Annotated[EventManager, Depends(get_event_manager)]


def get_user_mgmt_service(session: SessionDep, cache: CacheDep) -> UserMgmtService:
    return UserMgmtService(session, cache)


def get_user_query_service(session: SessionDep, cache: CacheDep) -> UserQueryService:
    return UserQueryService(session, cache)


def get_preference_service(session: SessionDep) -> PreferenceService:
    return PreferenceService(session)


def get_statistics_service(
    session: SessionDep,
    cache: CacheDep,
    page_cache: PageCacheDep,
) -> StatisticsService:
    return StatisticsService(session, cache, page_cache)


def get_sitemap_service(session: SessionDep, cache: CacheDep) -> SitemapService:
    return SitemapService(session, cache)


def get_article_service(
    session: SessionDep,
    cache: CacheDep,
    page_cache: PageCacheDep,
    events: EventsDep,
) -> ArticleService:
    return ArticleService(session, page_cache, events, cache)


def get_comment_service(session: SessionDep, events: EventsDep) -> CommentService:
    return CommentService(session, events)


UserMgmtDep = Annotated[UserMgmtService, Depends(get_user_mgmt_service)]
UserQueryDep = Annotated[UserQueryService, Depends(get_user_query_service)]
PreferenceDep = Annotated[PreferenceService, Depends(get_preference_service)]
StatisticsDep = Annotated[StatisticsService, Depends(get_statistics_service)]
SitemapDep = Annotated[SitemapService, Depends(get_sitemap_service)]
ArticleServiceDep = Annotated[ArticleService, Depends(get_article_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]


async def get_optional_user(
    request: Request,
    session: SessionDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> UserDB | None:
    """
    Resolve the session user from a bearer token or the session cookie.

    Parameters
    ----------
    request : Request
        Incoming request, for the session cookie.
    session : AsyncSession
        Database session.
    credentials : HTTPAuthorizationCredentials | None
        Bearer credentials, if sent.

    Returns
    -------
    UserDB | None
        The user, or None when no valid session accompanies the request.
    """
    token = credentials.credentials if credentials else request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    claims = decode_session_token(token)
    if claims is None:
        return None
    user = await UserRepository(session).get_by_id(claims.user_id)
    # a changed email invalidates outstanding sessions
    if user is None or user.email != claims.email:
        return None
    return user


async def get_current_user(
    user: Annotated[UserDB | None, Depends(get_optional_user)],
) -> UserDB:
    """
    Require a logged-in user.

    Raises
    ------
    NotAuthenticatedError
        If the request carries no valid session.
    """
    if user is None:
        raise NotAuthenticatedError
    return user


OptionalUserDep = Annotated[UserDB | None, Depends(get_optional_user)]
UserDBDep = Annotated[UserDB, Depends(get_current_user)]
