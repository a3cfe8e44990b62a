"""Application settings and configuration constants.

This module contains application settings, constants, and configuration
values for the Inkwell blog backend.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = Path(__file__).parent.parent.parent / ".env"

# --- Constants ---
DEFAULT_ROLE = "defaultRole"
ADMIN_ROLE = "adminRole"

# Articles flushed per view count synchronization
FLUSH_SIZE = 30

STATISTIC_ID = "statistic"
PREFERENCE_ID = "preference"

ADMIN_INDEX_URI = "/admin-index.do"


class Settings(BaseSettings):
    """Application settings with validation and default values."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Inkwell"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    RUNTIME_ENV: str = "LOCAL"
    SERVE_PATH: str = "http://localhost:8000"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE: str = "logs/inkwell.log"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./inkwell.db"
    DATABASE_ECHO: bool = False
    POOL_SIZE: int = 5
    MAX_OVERFLOW: int = 10
    POOL_TIMEOUT: int = 30
    POOL_RECYCLE: int = 1800

    # Redis Configuration (optional)
    REDIS_ENABLED: bool = False
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str | None = None

    # Session tokens
    SECRET_KEY: SecretStr = SecretStr("change-me-in-production")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    JWT_ISSUER: str = "inkwell"
    JWT_AUDIENCE: str = "inkwell-console"
    SESSION_COOKIE_NAME: str = "inkwell-session"
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "10/minute"

    # Password hashing
    PASSWORD_SECURITY_LEVEL: Literal["low", "medium", "high"] = "medium"

    # Blog preference defaults, seeded into storage on first start
    BLOG_HOST: str = "localhost:8000"
    BLOG_TITLE: str = "Inkwell"
    BLOG_SUBTITLE: str = "Just another Inkwell blog"
    ADMIN_NAME: str = "admin"
    ADMIN_EMAIL: str = ""
    # Creates the first administrator on an empty user table when set
    ADMIN_PASSWORD: SecretStr | None = None
    INSTALLATION_KEY: str = ""
    LOCALE: str = "en_US"

    # Outbound notifications
    BLOG_SEARCH_PING_URL: str = "http://blogsearch.google.com/ping"
    COMMENT_MIRROR_URL: str = "http://symphony.b3log.org:80/solo/comment"
    OUTBOUND_TIMEOUT: float = 10.0

    # Sitemap and statistics
    SITEMAP_PAGE_SIZE: int = 200
    ONLINE_VISITOR_EXPIRATION: int = 60 * 3  # seconds
    PAGE_CACHE_MAX_ENTRIES: int = 10_000

    # Observability
    ENABLE_METRICS: bool = True
    TRACING_ENABLED: bool = False
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None
    OTEL_TRACES_SAMPLER_ARG: float | None = None


settings = Settings()


@dataclass(frozen=True)
class Argon2Config:
    """Argon2id cost parameters for one security level."""

    memory_cost: int
    time_cost: int
    parallelism: int


CONFIG_MAP: dict[str, Argon2Config] = {
    "low": Argon2Config(memory_cost=8 * 1024, time_cost=1, parallelism=1),
    "medium": Argon2Config(memory_cost=64 * 1024, time_cost=2, parallelism=2),
    "high": Argon2Config(memory_cost=512 * 1024, time_cost=2, parallelism=2),
}


class RedisCacheConfig(BaseSettings):
    """Redis cache configuration."""

    model_config = SettingsConfigDict(env_prefix="REDIS_", case_sensitive=False)

    host: str = settings.REDIS_HOST
    port: int = settings.REDIS_PORT
    db: int = settings.REDIS_DB
    password: str | None = settings.REDIS_PASSWORD
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    socket_keepalive: bool = True
    health_check_interval: int = 30
    max_connections: int = 50
    decode_responses: bool = True
    encoding: str = "utf-8"


class CacheConfig(BaseSettings):
    """Cache configuration."""

    model_config = SettingsConfigDict(env_prefix="CACHE_", case_sensitive=False)

    default_ttl: int = 3600  # 1 hour
    max_ttl: int = 86400  # 24 hours
    key_prefix: str = "inkwell"
    query_ttl: int = 600  # 10 minutes


pool_kwargs = RedisCacheConfig().model_dump()
