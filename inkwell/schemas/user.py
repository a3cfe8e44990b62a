"""User console schemas. Field names on the wire are camelCase."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from inkwell.configs import ADMIN_ROLE, DEFAULT_ROLE

ROLE_PATTERN = f"^({DEFAULT_ROLE}|{ADMIN_ROLE})$"


class UserAddRequest(BaseModel):
    """Request body for adding a user."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="userName", min_length=1, max_length=100)
    email: EmailStr = Field(alias="userEmail")
    password: str = Field(alias="userPassword", min_length=1, max_length=128)
    role: str | None = Field(
        default=None,
        alias="userRole",
        pattern=ROLE_PATTERN,
        description="Defaults to defaultRole",
    )


class UserUpdateRequest(BaseModel):
    """Request body for updating a user. The role cannot be changed here."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(alias="oId")
    name: str = Field(alias="userName", min_length=1, max_length=100)
    email: EmailStr = Field(alias="userEmail")
    password: str = Field(alias="userPassword", min_length=1, max_length=128)


class UserResponse(BaseModel):
    """User as shown in the console; never includes the password hash."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID = Field(alias="oId")
    name: str = Field(alias="userName")
    email: str = Field(alias="userEmail")
    role: str = Field(alias="userRole")
    article_count: int = Field(alias="userArticleCount")
    published_article_count: int = Field(alias="userPublishedArticleCount")


class StatusResponse(BaseModel):
    """``{statusCode, msg?, oId?}`` envelope of console write operations."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: bool = Field(alias="statusCode")
    msg: str | None = None
    id: UUID | None = Field(default=None, alias="oId")


class UserDetailResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status_code: bool = Field(alias="statusCode")
    user: UserResponse | None = None
    msg: str | None = None


class PaginationInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page_count: int = Field(alias="paginationPageCount")
    page_nums: list[int] = Field(alias="paginationPageNums")


class UserListResponse(BaseModel):
    """One page of users and the pagination window around it."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: bool = Field(default=True, alias="statusCode")
    pagination: PaginationInfo
    users: list[UserResponse]
