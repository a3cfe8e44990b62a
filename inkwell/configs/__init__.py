from inkwell.configs.labels import PageType, get_label
from inkwell.configs.settings import (
    ADMIN_INDEX_URI,
    ADMIN_ROLE,
    CONFIG_MAP,
    DEFAULT_ROLE,
    FLUSH_SIZE,
    PREFERENCE_ID,
    STATISTIC_ID,
    CacheConfig,
    RedisCacheConfig,
    pool_kwargs,
    settings,
)

__all__ = [
    "ADMIN_INDEX_URI",
    "ADMIN_ROLE",
    "CONFIG_MAP",
    "DEFAULT_ROLE",
    "FLUSH_SIZE",
    "PREFERENCE_ID",
    "STATISTIC_ID",
    "CacheConfig",
    "PageType",
    "RedisCacheConfig",
    "get_label",
    "pool_kwargs",
    "settings",
]
