"""SQLAlchemy declarative base and timestamp mixins."""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CreatedAtMixin:
    """Mixin adding created_at only (rows that are never updated in place)."""

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class TimestampMixin(CreatedAtMixin):
    """Mixin adding created_at and updated_at.

    updated_at is only refreshed when the row is flushed dirty; callers that must
    bump it without changing any other column assign it explicitly.
    """

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as the UTC they were written as."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
