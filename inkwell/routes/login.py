"""
Login Routes.

Session login and logout for the admin console.
"""

from typing import Annotated
from urllib.parse import urlsplit

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import ORJSONResponse, RedirectResponse
from starlette.status import HTTP_302_FOUND

from inkwell.configs import ADMIN_INDEX_URI, get_label, settings
from inkwell.decorators import timed
from inkwell.dependencies import OptionalUserDep, PreferenceDep, UserQueryDep
from inkwell.managers.rate_limiter import limiter
from inkwell.managers.token_manager import create_session_token
from inkwell.monitoring import get_logger
from inkwell.schemas import LoginPageResponse, LoginRequest, LoginResponse
from inkwell.utils.helpers import normalize_email

logger = get_logger(__name__)

router = APIRouter(tags=["🔑 Login"])

GotoQuery = Annotated[str | None, Query(description="Where to go after login or logout")]


def safe_goto(goto: str | None, default: str) -> str:
    """
    Keep a redirect target on this blog.

    Relative paths and URLs under ``SERVE_PATH`` pass; anything else falls
    back to ``default``. Browsers read ``\\`` as ``/`` and drop tabs and
    newlines, so targets holding either never pass.
    """
    if not goto or "\\" in goto or any(ord(ch) < 0x20 or ch == "\x7f" for ch in goto):
        return default
    parts = urlsplit(goto)
    if goto.startswith("/") and not parts.scheme and not parts.netloc:
        return goto
    if goto == settings.SERVE_PATH or goto.startswith(f"{settings.SERVE_PATH}/"):
        return goto
    return default


@router.get(
    "/login",
    response_class=ORJSONResponse,
    response_model=LoginPageResponse,
    summary="Show login page",
    description="Return the data the login page needs, or redirect when already logged in.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "blogTitle": "Inkwell",
                        "blogHost": "localhost:8000",
                        "goto": "/admin-index.do",
                    },
                },
            },
        },
        302: {"description": "Already logged in"},
    },
    operation_id="show_login",
)
async def show_login(
    user: OptionalUserDep,
    preferences: PreferenceDep,
    goto: GotoQuery = None,
) -> LoginPageResponse | RedirectResponse:
    """
    Show the login page.

    Parameters
    ----------
    user : UserDB | None
        Current session user.
    preferences : PreferenceService
        Blog preference lookup.
    goto : str | None
        Target after login; defaults to the admin index.

    Returns
    -------
    LoginPageResponse | RedirectResponse
        Page data, or a redirect to ``goto`` for logged-in users.
    """
    target = safe_goto(goto, ADMIN_INDEX_URI)
    if user is not None:
        return RedirectResponse(target, status_code=HTTP_302_FOUND)

    preference = await preferences.get_preference()
    return LoginPageResponse(
        blog_title=preference.blog_title,
        blog_host=preference.blog_host,
        goto=target,
    )


@router.post(
    "/login",
    response_class=ORJSONResponse,
    response_model=LoginResponse,
    response_model_exclude_none=True,
    summary="Log in",
    description="Check credentials and start a console session.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "examples": {
                        "success": {"value": {"isLoggedIn": True, "to": "/admin-index.do"}},
                        "failure": {
                            "value": {"isLoggedIn": False, "msg": "Wrong email or password"},
                        },
                    },
                },
            },
        },
        429: {"description": "Too many login attempts"},
    },
    operation_id="login",
)
@timed("POST /login")
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    users: UserQueryDep,
    goto: GotoQuery = None,
) -> LoginResponse:
    """
    Log a user in.

    Parameters
    ----------
    request : Request
        Incoming request (used by the rate limiter).
    response : Response
        Outgoing response, carries the session cookie.
    credentials : LoginRequest
        Email and password.
    users : UserQueryService
        Credential checks.
    goto : str | None
        Where the client should go after logging in.

    Returns
    -------
    LoginResponse
        ``isLoggedIn`` and, on success, the target to navigate to.
    """
    user = await users.authenticate(normalize_email(credentials.email), credentials.password)
    if user is None:
        return LoginResponse(is_logged_in=False, msg=get_label("loginFailLabel"))

    token = create_session_token(user.id, user.email)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.ENVIRONMENT == "production",
    )
    logger.info("User logged in", user_id=str(user.id))
    return LoginResponse(is_logged_in=True, to=safe_goto(goto, ADMIN_INDEX_URI))


@router.get(
    "/logout",
    summary="Log out",
    description="End the console session and redirect.",
    responses={302: {"description": "Redirect to goto"}},
    operation_id="logout",
)
async def logout(user: OptionalUserDep, goto: GotoQuery = None) -> RedirectResponse:
    """
    Log the current user out.

    Parameters
    ----------
    user : UserDB | None
        Current session user, if any.
    goto : str | None
        Redirect target; defaults to the blog root.

    Returns
    -------
    RedirectResponse
        Redirect with the session cookie cleared.
    """
    response = RedirectResponse(safe_goto(goto, "/"), status_code=HTTP_302_FOUND)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    if user is not None:
        logger.info("User logged out", user_id=str(user.id))
    return response
