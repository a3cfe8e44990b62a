"""Service layer errors."""

from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from inkwell.configs.labels import get_label
from inkwell.errors.base import BaseAppError, create_exception_handler
from inkwell.monitoring import get_logger

logger = get_logger(__name__)


class ServiceError(BaseAppError):
    """Raised by management services; wraps persistence failures."""

    def __init__(
        self,
        detail: str = "Service Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DuplicateEmailError(ServiceError):
    """Raised when another user already owns the email."""

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or get_label("duplicatedEmailLabel"), HTTP_409_CONFLICT)


class UserNotFoundError(ServiceError):
    """Raised when a user id does not resolve."""

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or get_label("updateFailLabel"), HTTP_404_NOT_FOUND)


class ArticleNotFoundError(ServiceError):
    """Raised when an article id or permalink does not resolve."""

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or get_label("notFoundLabel"), HTTP_404_NOT_FOUND)


class ConfigurationUnavailableError(BaseAppError):
    """Raised when the blog preference cannot be loaded."""

    def __init__(self, detail: str = "Blog preference is unavailable") -> None:
        super().__init__(detail, HTTP_503_SERVICE_UNAVAILABLE)


class SitemapUnavailableError(BaseAppError):
    """Raised instead of emitting a partial sitemap."""

    def __init__(self, detail: str = "Sitemap is temporarily unavailable") -> None:
        super().__init__(detail, HTTP_503_SERVICE_UNAVAILABLE)


service_exception_handler = create_exception_handler(logger)
