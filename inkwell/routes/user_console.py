"""
User Console Routes.

User management for administrators. Write operations answer with a
``{statusCode, msg, oId}`` envelope; service failures are reported in the
envelope instead of as HTTP errors.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path
from fastapi.responses import ORJSONResponse

from inkwell.auth import AdminDep
from inkwell.configs import get_label
from inkwell.decorators import timed
from inkwell.dependencies import UserMgmtDep, UserQueryDep
from inkwell.errors import ServiceError
from inkwell.monitoring import get_logger
from inkwell.schemas import (
    PaginationInfo,
    StatusResponse,
    UserAddRequest,
    UserDetailResponse,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/console", tags=["👑 User Console"])

FORBIDDEN = {
    "description": "Forbidden",
    "content": {"application/json": {"example": {"detail": "Admin access required"}}},
}
UNAUTHORIZED = {
    "description": "Not logged in",
    "content": {"application/json": {"example": {"detail": "Not logged in"}}},
}


@router.post(
    "/user/",
    response_class=ORJSONResponse,
    response_model=StatusResponse,
    response_model_exclude_none=True,
    summary="Add a user",
    description="Create a user. The role defaults to defaultRole.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "examples": {
                        "added": {
                            "value": {
                                "statusCode": True,
                                "msg": "Added successfully",
                                "oId": "123e4567-e89b-12d3-a456-426614174000",
                            },
                        },
                        "duplicate": {
                            "value": {"statusCode": False, "msg": "Duplicated email"},
                        },
                    },
                },
            },
        },
        401: UNAUTHORIZED,
        403: FORBIDDEN,
    },
    operation_id="console_add_user",
)
@timed("POST /console/user/")
async def add_user(
    admin: AdminDep,
    body: UserAddRequest,
    users: UserMgmtDep,
) -> StatusResponse:
    """
    Add a user.

    Parameters
    ----------
    admin : UserDB
        Administrator making the change.
    body : UserAddRequest
        New user's name, email, password and optional role.
    users : UserMgmtService
        User management service.

    Returns
    -------
    StatusResponse
        ``oId`` of the new user on success.
    """
    try:
        user_id = await users.add_user(body.name, body.email, body.password, body.role)
    except ServiceError as e:
        return StatusResponse(status_code=False, msg=e.detail)
    return StatusResponse(status_code=True, msg=get_label("addSuccLabel"), id=user_id)


@router.put(
    "/user/",
    response_class=ORJSONResponse,
    response_model=StatusResponse,
    response_model_exclude_none=True,
    summary="Update a user",
    description="Overwrite a user's name, email and password.",
    responses={401: UNAUTHORIZED, 403: FORBIDDEN},
    operation_id="console_update_user",
)
@timed("PUT /console/user/")
async def update_user(
    admin: AdminDep,
    body: UserUpdateRequest,
    users: UserMgmtDep,
) -> StatusResponse:
    """
    Update a user.

    Parameters
    ----------
    admin : UserDB
        Administrator making the change.
    body : UserUpdateRequest
        User id and new name, email and password.
    users : UserMgmtService
        User management service.

    Returns
    -------
    StatusResponse
        ``statusCode`` False with the reason when the update is rejected.
    """
    try:
        await users.update_user(body.id, body.name, body.email, body.password)
    except ServiceError as e:
        return StatusResponse(status_code=False, msg=e.detail)
    return StatusResponse(status_code=True, msg=get_label("updateSuccLabel"))


@router.delete(
    "/user/{user_id}",
    response_class=ORJSONResponse,
    response_model=StatusResponse,
    response_model_exclude_none=True,
    summary="Remove a user",
    description="Delete a user. Removing an unknown id succeeds without effect.",
    responses={401: UNAUTHORIZED, 403: FORBIDDEN},
    operation_id="console_remove_user",
)
@timed("DELETE /console/user/{user_id}")
async def remove_user(
    admin: AdminDep,
    user_id: Annotated[UUID, Path(description="User id")],
    users: UserMgmtDep,
) -> StatusResponse:
    """
    Remove a user.

    Parameters
    ----------
    admin : UserDB
        Administrator making the change.
    user_id : UUID
        Id of the user to delete.
    users : UserMgmtService
        User management service.

    Returns
    -------
    StatusResponse
        Outcome envelope.
    """
    try:
        await users.remove_user(user_id)
    except ServiceError as e:
        return StatusResponse(status_code=False, msg=e.detail)
    return StatusResponse(status_code=True, msg=get_label("removeSuccLabel"))


@router.get(
    "/user/{user_id}",
    response_class=ORJSONResponse,
    response_model=UserDetailResponse,
    response_model_exclude_none=True,
    summary="Get a user",
    responses={401: UNAUTHORIZED, 403: FORBIDDEN},
    operation_id="console_get_user",
)
@timed("GET /console/user/{user_id}")
async def get_user(
    admin: AdminDep,
    user_id: Annotated[UUID, Path(description="User id")],
    users: UserQueryDep,
) -> UserDetailResponse:
    """Fetch one user; ``statusCode`` is False when the id does not resolve."""
    user = await users.get_user(user_id)
    if user is None:
        return UserDetailResponse(status_code=False, msg=get_label("getFailLabel"))
    return UserDetailResponse(status_code=True, user=UserResponse.model_validate(user))


@router.get(
    "/users/{page}/{size}/{window}",
    response_class=ORJSONResponse,
    response_model=UserListResponse,
    summary="List users",
    description="One page of users, newest first, with the pagination window around it.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "statusCode": True,
                        "pagination": {
                            "paginationPageCount": 3,
                            "paginationPageNums": [1, 2, 3],
                        },
                        "users": [
                            {
                                "oId": "123e4567-e89b-12d3-a456-426614174000",
                                "userName": "admin",
                                "userEmail": "admin@example.com",
                                "userRole": "adminRole",
                                "userArticleCount": 3,
                                "userPublishedArticleCount": 2,
                            },
                        ],
                    },
                },
            },
        },
        401: UNAUTHORIZED,
        403: FORBIDDEN,
    },
    operation_id="console_list_users",
)
@timed("GET /console/users/{page}/{size}/{window}")
async def list_users(
    admin: AdminDep,
    users: UserQueryDep,
    page: Annotated[int, Path(ge=1, description="1-based page number")],
    size: Annotated[int, Path(ge=1, le=100, description="Users per page")],
    window: Annotated[int, Path(ge=1, le=50, description="Pagination window size")],
) -> UserListResponse:
    """
    List users.

    Parameters
    ----------
    admin : UserDB
        Administrator reading the list.
    users : UserQueryService
        User queries.
    page : int
        Page number.
    size : int
        Page size.
    window : int
        Number of page links around the current page.

    Returns
    -------
    UserListResponse
        Users on the page and pagination info.
    """
    result = await users.get_users(page, size, window)
    return UserListResponse(
        pagination=PaginationInfo(page_count=result.page_count, page_nums=result.page_nums),
        users=[UserResponse.model_validate(user) for user in result.users],
    )
