from inkwell.schemas.article import (
    ArticleResponse,
    ArticleUpdate,
    CommentCreate,
)
from inkwell.schemas.auth import LoginPageResponse, LoginRequest, LoginResponse
from inkwell.schemas.health import HealthCheckResponse
from inkwell.schemas.stat import OnlineVisitorResponse, ViewCountSyncResponse
from inkwell.schemas.user import (
    PaginationInfo,
    StatusResponse,
    UserAddRequest,
    UserDetailResponse,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)

__all__ = [
    "ArticleResponse",
    "ArticleUpdate",
    "CommentCreate",
    "HealthCheckResponse",
    "LoginPageResponse",
    "LoginRequest",
    "LoginResponse",
    "OnlineVisitorResponse",
    "PaginationInfo",
    "StatusResponse",
    "UserAddRequest",
    "UserDetailResponse",
    "UserListResponse",
    "UserResponse",
    "UserUpdateRequest",
    "ViewCountSyncResponse",
]
