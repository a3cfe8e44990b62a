"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import event
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from inkwell.configs import PREFERENCE_ID, STATISTIC_ID, settings
from inkwell.errors import DatabaseConnectionError, TransactionError
from inkwell.monitoring import get_logger

if TYPE_CHECKING:
    from inkwell.managers.cache_manager import CacheManager

logger = get_logger(__name__)

STATEMENT_TIMEOUT_MS = 30000
STALE_CACHES_KEY = "stale_cache_namespaces"


def _configure_engine_events(engine: AsyncEngine) -> None:
    """Configure connection pool events for monitoring."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("New database connection established")

    @event.listens_for(engine.sync_engine, "checkout")
    def on_checkout(
        dbapi_connection: object,
        connection_record: object,
        connection_proxy: object,
    ) -> None:
        logger.debug("Connection checked out from pool")


def _engine_kwargs(url: str) -> dict[str, Any]:
    """Pool and driver options; SQLite gets neither pool sizing nor timeouts."""
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": settings.POOL_SIZE,
        "max_overflow": settings.MAX_OVERFLOW,
        "pool_timeout": settings.POOL_TIMEOUT,
        "pool_recycle": settings.POOL_RECYCLE,
        "pool_pre_ping": True,
        "connect_args": {
            "command_timeout": STATEMENT_TIMEOUT_MS / 1000,
            "server_settings": {
                "statement_timeout": str(STATEMENT_TIMEOUT_MS),
                "lock_timeout": str(STATEMENT_TIMEOUT_MS),
            },
        },
    }


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    **_engine_kwargs(settings.DATABASE_URL),
)

if settings.DEBUG:
    _configure_engine_events(engine)

async_session_maker: async_sessionmaker[SQLModelAsyncSession] = async_sessionmaker(
    engine,
    class_=SQLModelAsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """
    Dependency for getting async database sessions.

    Yields:
        AsyncSession: Database session
    """
    async with transaction() as session:
        yield session


def mark_cache_stale(session: AsyncSession, cache: "CacheManager", namespace: str) -> None:
    """Schedule ``namespace`` to be cleared once ``session`` commits."""
    session.info.setdefault(STALE_CACHES_KEY, {})[namespace] = cache


def is_cache_stale(session: AsyncSession, namespace: str) -> bool:
    """Whether ``session`` holds uncommitted writes to ``namespace``."""
    return namespace in session.info.get(STALE_CACHES_KEY, {})


def discard_stale_caches(session: AsyncSession) -> None:
    session.info.pop(STALE_CACHES_KEY, None)


async def clear_stale_caches(session: AsyncSession) -> None:
    """Clear every namespace written by ``session``. Call only after a commit."""
    stale: dict[str, CacheManager] = session.info.pop(STALE_CACHES_KEY, {})
    for namespace, cache in stale.items():
        await cache.clear(namespace)


@asynccontextmanager
async def transaction() -> AsyncGenerator[AsyncSession]:
    """
    Open a session that commits on successful exit and rolls back on error.

    Cached query results the session made stale are cleared after the commit.

    Yields:
        AsyncSession: Database session within a transaction
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            discard_stale_caches(session)
            logger.exception("Transaction error")
            raise
        await clear_stale_caches(session)


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncGenerator[AsyncSession]:
    """
    Run a unit of work on an existing session as a single transaction.

    Everything flushed inside the block is committed together on exit. Any
    exception rolls the whole unit back before propagating, so none of its
    writes survive. Repository query caches touched by the unit are cleared
    only once the commit has succeeded, and left alone on rollback.

    Args:
        session: Session the unit of work runs on

    Yields:
        AsyncSession: The same session

    Raises:
        TransactionError: If the commit itself fails

    Example:
        ```python
        async with atomic(session):
            await statistic_repo.save(statistic)
            await article_repo.update(article)
        ```
    """
    try:
        yield session
    except Exception:
        if session.in_transaction():
            await session.rollback()
        discard_stale_caches(session)
        raise

    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        discard_stale_caches(session)
        logger.exception("Commit failed")
        raise TransactionError from e
    await clear_stale_caches(session)


async def init_db() -> None:
    """
    Create all tables and seed the singleton rows.

    Tables are created in place; there are no migrations.
    """
    # Import all models to ensure they are registered
    import inkwell.models  # noqa: F401, PLC0415

    try:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
    except (OperationalError, OSError) as e:
        logger.exception("Cannot reach the database")
        raise DatabaseConnectionError from e

    async with transaction() as session:
        await seed_singletons(session)
    logger.info("Database initialized successfully!")


async def seed_singletons(session: AsyncSession) -> None:
    """Insert the preference and statistic rows if they do not exist yet."""
    from inkwell.models import PreferenceDB, StatisticDB  # noqa: PLC0415

    if await session.get(PreferenceDB, PREFERENCE_ID) is None:
        session.add(
            PreferenceDB(
                id=PREFERENCE_ID,
                blog_host=settings.BLOG_HOST,
                blog_title=settings.BLOG_TITLE,
                blog_subtitle=settings.BLOG_SUBTITLE,
                admin_email=settings.ADMIN_EMAIL,
                installation_key=settings.INSTALLATION_KEY,
                locale=settings.LOCALE,
            ),
        )
        logger.info("Seeded blog preference", blog_host=settings.BLOG_HOST)

    if await session.get(StatisticDB, STATISTIC_ID) is None:
        session.add(StatisticDB(id=STATISTIC_ID))


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
    logger.info("Database connections closed")
