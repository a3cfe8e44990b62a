"""User database model using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from inkwell.configs import DEFAULT_ROLE


class UserDB(SQLModel, table=True):
    """
    User database model.

    Emails are stored trimmed and lower-cased so the unique index is
    case-insensitive in effect.
    """

    __tablename__ = cast("declared_attr[str]", "users")

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="User ID",
    )

    email: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="Email address (unique, normalized)",
    )
    name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Display name",
    )
    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Argon2 password hash",
    )
    role: str = Field(
        default=DEFAULT_ROLE,
        sa_column=Column(String(20), nullable=False, server_default=DEFAULT_ROLE),
        description="User role (defaultRole, adminRole)",
    )

    # Derived counters
    article_count: int = Field(default=0, nullable=False)
    published_article_count: int = Field(default=0, nullable=False)

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "admin@example.com",
                "name": "admin",
                "role": "adminRole",
                "article_count": 0,
                "published_article_count": 0,
            },
        },
    )
