from inkwell.errors.auth import (
    ForbiddenError,
    NotAuthenticatedError,
    UserAuthenticationError,
    auth_exception_handler,
)
from inkwell.errors.base import BASE_EXCEPTION, BaseAppError, create_exception_handler
from inkwell.errors.cache import (
    CacheDeserializationError,
    CacheExceptionError,
    CacheKeyError,
    CacheSerializationError,
    cache_exception_handler,
)
from inkwell.errors.database import (
    DatabaseConnectionError,
    DuplicateEntryError,
    RepositoryError,
    TransactionError,
    repository_exception_handler,
)
from inkwell.errors.password_hasher import (
    PasswordHashingError,
    password_hashing_exception_handler,
)
from inkwell.errors.service import (
    ArticleNotFoundError,
    ConfigurationUnavailableError,
    DuplicateEmailError,
    ServiceError,
    SitemapUnavailableError,
    UserNotFoundError,
    service_exception_handler,
)

__all__ = [
    "BASE_EXCEPTION",
    "ArticleNotFoundError",
    "BaseAppError",
    "CacheDeserializationError",
    "CacheExceptionError",
    "CacheKeyError",
    "CacheSerializationError",
    "ConfigurationUnavailableError",
    "DatabaseConnectionError",
    "DuplicateEmailError",
    "DuplicateEntryError",
    "ForbiddenError",
    "NotAuthenticatedError",
    "PasswordHashingError",
    "RepositoryError",
    "ServiceError",
    "SitemapUnavailableError",
    "TransactionError",
    "UserAuthenticationError",
    "UserNotFoundError",
    "auth_exception_handler",
    "cache_exception_handler",
    "create_exception_handler",
    "password_hashing_exception_handler",
    "repository_exception_handler",
    "service_exception_handler",
]
