"""Declarative base and shared columns."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }


class TimestampMixin:
    """Write time of the row; services may overwrite it on refresh."""

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)


class UpdatedAtMixin:
    """Last modification time, maintained by the ORM."""

    updated_at: Mapped[datetime | None] = mapped_column(
        default=None, onupdate=utcnow, nullable=True
    )
