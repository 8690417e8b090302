"""
FamilyEvent model.

A booking in a family's calendar, mirrored to one Google Calendar event.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class FamilyEvent(TimestampMixin, Base):
    """
    A scheduled event owned by a family.

    Key fields:
    - creator: user who booked the event
    - assign_for: member responsible for the event (may differ from creator)
    - event_id: ID of the mirrored Google Calendar event

    A row is only written after the Google Calendar insert succeeded, so
    event_id is always set.
    """

    __tablename__ = "family_events"

    family_id: Mapped[str] = mapped_column(
        ForeignKey("families.id", ondelete="CASCADE"),
        primary_key=True,
        doc="Family this event belongs to"
    )

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        doc="Generated URL-safe event ID"
    )

    creator: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        doc="User ID of the member who created the event"
    )

    # Timing
    start: Mapped[datetime] = mapped_column(
        "start_time",
        nullable=False,
        doc="Event start time (UTC)"
    )

    end: Mapped[datetime] = mapped_column(
        "end_time",
        nullable=False,
        doc="Event end time (UTC)"
    )

    summary: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        doc="Event title"
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Event description as entered by the user"
    )

    assign_for: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        doc="User ID of the member responsible for the event"
    )

    event_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Google Calendar event ID"
    )

    # Indexes for the conflict range queries
    __table_args__ = (
        Index("idx_family_event_start", "family_id", "start_time"),
        Index("idx_family_event_end", "family_id", "end_time"),
    )

    def to_body(self) -> dict:
        """Document body as returned by the API (without the id)."""
        return {
            "creator": self.creator,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "summary": self.summary,
            "description": self.description,
            "assignFor": self.assign_for,
            "eventId": self.event_id,
        }

    def __repr__(self) -> str:
        return f"<FamilyEvent(id='{self.id}', summary='{self.summary}', start='{self.start}')>"
