"""SQLAlchemy models for vault persistence."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""


class Secret(Base):
    """
    A named key/value map owned by exactly one user.

    ``user_id`` is never joined against ``users``; ownership is enforced by
    filtering on it in every query.
    """

    __tablename__ = "secrets"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    data: Mapped[dict[str, str]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    # Scoped lookups: list by owner, fetch by owner + name.
    __table_args__ = (
        Index("ix_secrets_name", "name"),
        Index("ix_secrets_user_id", "user_id"),
        Index("ix_secrets_user_id_name", "user_id", "name"),
    )

    def __repr__(self) -> str:
        return f"<Secret(id={self.id!r}, user_id={self.user_id!r}, name={self.name!r})>"


class DirectoryUser(Base):
    """
    User directory entry, owned by the identity platform.

    The vault only reads it to turn a username into the owner identifier.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<DirectoryUser(id={self.id!r}, username={self.username!r})>"
