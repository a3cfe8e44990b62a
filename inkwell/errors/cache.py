"""Custom exceptions for caching module."""

from inkwell.errors.base import BaseAppError, create_exception_handler
from inkwell.monitoring import get_logger

logger = get_logger(__name__)


class CacheExceptionError(BaseAppError):
    """Base exception for cache operations."""

    def __init__(self, detail: str = "Cache operation failed") -> None:
        super().__init__(detail)


class CacheKeyError(CacheExceptionError):
    """Raised when cache key operation fails."""


class CacheSerializationError(CacheExceptionError):
    """Raised when cache serialization fails."""


class CacheDeserializationError(CacheExceptionError):
    """Raised when cache deserialization fails."""


cache_exception_handler = create_exception_handler(logger)
