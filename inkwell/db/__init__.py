"""Database engine, sessions and transactions."""

from inkwell.db.database import (
    async_session_maker,
    atomic,
    clear_stale_caches,
    close_db,
    engine,
    get_session,
    init_db,
    is_cache_stale,
    mark_cache_stale,
    seed_singletons,
    transaction,
)

__all__ = [
    "async_session_maker",
    "atomic",
    "clear_stale_caches",
    "close_db",
    "engine",
    "get_session",
    "init_db",
    "is_cache_stale",
    "mark_cache_stale",
    "seed_singletons",
    "transaction",
]
