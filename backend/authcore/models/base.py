"""Reusable SQLAlchemy mixins shared by domain models (typed 2.0)."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column


def as_utc(value: datetime) -> datetime:
    """Label naive datetimes as UTC (SQLite drops tzinfo on read)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class TimestampMixin:
    """Provide ``created_at`` and ``updated_at`` timestamp columns.

    Attributes
    ----------
    created_at:
        Timezone-aware timestamp filled by the database on insert.
    updated_at:
        Timezone-aware timestamp refreshed by the database on update.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class PKMixin:
    """Expose an integer surrogate primary key column named ``id``."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class UUIDPKMixin:
    """Expose an opaque string primary key (UUID4) named ``id``.

    Identity claims carry this value verbatim, so it is never reused.
    """

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))


class ReprMixin:
    """Provide a concise ``__repr__`` including the class name and id."""

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        key = getattr(self, "id", None)
        return f"<{cls} id={key}>"
