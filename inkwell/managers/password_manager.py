"""
Password hashing with Argon2id through passlib's CryptContext.

Hashing is CPU bound, so the async helpers run it on a small thread pool.
"""

from asyncio import get_running_loop
from concurrent.futures import ThreadPoolExecutor

from passlib.context import CryptContext
from passlib.exc import InternalBackendError

from inkwell.configs import CONFIG_MAP, settings
from inkwell.decorators.with_retry import with_retry
from inkwell.errors import PasswordHashingError
from inkwell.monitoring import get_logger

executor = ThreadPoolExecutor(max_workers=4)
logger = get_logger(__name__)


class PasswordHasher:
    """Argon2id hasher tuned by ``PASSWORD_SECURITY_LEVEL``."""

    def __init__(self, level: str = settings.PASSWORD_SECURITY_LEVEL) -> None:
        self.level = level
        cost = CONFIG_MAP[level]
        self.pwd_context = CryptContext(
            schemes=["argon2"],
            argon2__memory_cost=cost.memory_cost,
            argon2__time_cost=cost.time_cost,
            argon2__parallelism=cost.parallelism,
        )
        logger.info(f"PasswordHasher initialized with Argon2id on level {self.level}")

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        Raises:
            ValueError: If password is empty
            PasswordHashingError: If the backend fails
        """
        if not password:
            msg = "Password cannot be empty"
            raise ValueError(msg)
        try:
            return self.pwd_context.hash(password)
        except (ValueError, InternalBackendError, UnicodeError) as e:
            logger.exception("Error hashing password")
            mssg = "Failed to hash password"
            raise PasswordHashingError(mssg) from e

    def verify(self, password: str, hashed_password: str | None) -> bool:
        """
        Check a plaintext password against a stored hash.

        A missing or malformed hash never matches. A dummy verification runs
        for missing hashes so unknown users take as long as wrong passwords.
        """
        if not hashed_password or not hashed_password.strip():
            self.pwd_context.dummy_verify()
            return False
        try:
            return self.pwd_context.verify(password, hashed_password)
        except (ValueError, TypeError):
            logger.exception("Stored hash is corrupted or invalid format")
            return False


_default_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    global _default_hasher  # noqa: PLW0603
    if _default_hasher is None:
        _default_hasher = PasswordHasher()
    return _default_hasher


@with_retry(base_delay=1, max_delay=10, exec_retry=PasswordHashingError)
async def hash_password(password: str) -> str:
    """Hash ``password`` off the event loop."""
    return await get_running_loop().run_in_executor(
        executor,
        get_password_hasher().hash,
        password,
    )


async def verify_password(password: str, hashed_password: str | None) -> bool:
    """Verify ``password`` off the event loop."""
    return await get_running_loop().run_in_executor(
        executor,
        get_password_hasher().verify,
        password,
        hashed_password,
    )
