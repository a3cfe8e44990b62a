"""Authentication errors."""

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from inkwell.errors.base import BaseAppError, create_exception_handler
from inkwell.monitoring import get_logger

logger = get_logger(__name__)


class UserAuthenticationError(BaseAppError):
    """Base class for authentication errors."""

    def __init__(
        self,
        detail: str = "Authentication failed",
        status_code: int = HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(detail, status_code)


class NotAuthenticatedError(UserAuthenticationError):
    """Raised when no valid session accompanies the request."""

    def __init__(self) -> None:
        super().__init__("Not logged in", HTTP_401_UNAUTHORIZED)


class ForbiddenError(UserAuthenticationError):
    """Raised when the session user lacks the admin role."""

    def __init__(self, detail: str = "Admin access required") -> None:
        super().__init__(detail, HTTP_403_FORBIDDEN)


auth_exception_handler = create_exception_handler(logger)
