"""
Base model definitions for SQLAlchemy.

Provides:
- UTCDateTime TypeDecorator for timezone-aware timestamps across SQLite and PostgreSQL
- Base declarative base
- TimestampMixin with audit fields
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, TypeDecorator, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Platform-independent timezone-aware timestamp.

    PostgreSQL keeps the offset natively. SQLite stores naive text, so values
    are normalized to UTC on the way in and tagged as UTC on the way out.
    Range queries compare correctly on both databases as long as every value
    goes through this type.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        """Normalize datetimes to UTC before writing or comparing."""
        if value is None:
            return value

        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)

        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        """Return aware UTC datetimes regardless of dialect."""
        if value is None:
            return value

        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base for all models."""

    type_annotation_map = {
        datetime: UTCDateTime,
    }


class TimestampMixin:
    """
    Audit timestamps shared by every stored document.

    - created_at: Timestamp of record creation (UTC)
    - updated_at: Timestamp of last update (UTC, auto-updates)
    """

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        doc="Timestamp of record creation (UTC)"
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime,
        onupdate=utcnow,
        nullable=True,
        doc="Timestamp of last update (UTC)"
    )

    def to_dict(self) -> dict:
        """
        Convert model instance to dictionary.

        Returns:
            Dictionary with all column values keyed by attribute name (excludes relationships)
        """
        return {
            attr.key: getattr(self, attr.key)
            for attr in self.__mapper__.column_attrs
        }
