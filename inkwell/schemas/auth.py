from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(alias="userEmail", min_length=1)
    password: str = Field(alias="userPassword", min_length=1)


class LoginResponse(BaseModel):
    """``to`` is where the client should go after a successful login."""

    model_config = ConfigDict(populate_by_name=True)

    is_logged_in: bool = Field(alias="isLoggedIn")
    msg: str | None = None
    to: str | None = None


class LoginPageResponse(BaseModel):
    """Data the login page renders."""

    model_config = ConfigDict(populate_by_name=True)

    blog_title: str = Field(alias="blogTitle")
    blog_host: str = Field(alias="blogHost")
    goto: str
