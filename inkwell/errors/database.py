from starlette.status import (
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from inkwell.errors.base import BaseAppError, create_exception_handler
from inkwell.monitoring import get_logger

logger = get_logger(__name__)


class RepositoryError(BaseAppError):
    """Base exception raised by the storage layer."""

    def __init__(
        self,
        detail: str = "Repository Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DatabaseConnectionError(RepositoryError):
    """Exception raised when database connection fails."""

    def __init__(
        self,
        detail: str = "Failed to connect to the database",
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


class DuplicateEntryError(RepositoryError):
    """Exception raised when a unique constraint is violated."""

    def __init__(
        self,
        detail: str = "A record with this value already exists",
    ) -> None:
        super().__init__(detail, HTTP_409_CONFLICT)


class TransactionError(RepositoryError):
    """Exception raised when a commit fails."""

    def __init__(
        self,
        detail: str = "Transaction failed",
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


repository_exception_handler = create_exception_handler(logger)
