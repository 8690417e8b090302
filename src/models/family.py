"""
User, Family and FamilyMember models.

Entities:
- User: An authenticated person, optionally linked to one family
- Family: A group of users sharing one external calendar
- FamilyMember: A user's role-bearing membership in a family

Members and events live under their family: both tables key on
(family_id, id), so a row can only be addressed through its family.
"""

from typing import Optional

from sqlalchemy import String, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin

OWNER_ROLE = "owner"


class User(TimestampMixin, Base):
    """
    An authenticated user.

    Read-only for the calendar endpoints: only the family reference is used
    to locate the caller's family.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(128),
        primary_key=True,
        doc="User ID issued by the authentication layer"
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
        doc="Display name"
    )

    family_id: Mapped[Optional[str]] = mapped_column(
        String(128),
        nullable=True,
        doc="Family this user belongs to (NULL if none). Not enforced as a foreign key."
    )

    def __repr__(self) -> str:
        return f"<User(id='{self.id}', family_id='{self.family_id}')>"


class Family(TimestampMixin, Base):
    """
    A family sharing one external calendar.

    The calendar_id references the Google Calendar every family event is
    mirrored to.
    """

    __tablename__ = "families"

    id: Mapped[str] = mapped_column(
        String(128),
        primary_key=True,
        doc="Family ID"
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
        doc="Family name"
    )

    calendar_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Google Calendar ID for syncing events"
    )

    def to_body(self) -> dict:
        """Document body as returned by the API (without the id)."""
        return {
            "name": self.name,
            "calendarId": self.calendar_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<Family(id='{self.id}', calendar_id='{self.calendar_id}')>"


class FamilyMember(TimestampMixin, Base):
    """
    A user's membership in a family.

    The member id equals the user id. Role 'owner' grants permission to
    delete any event in the family.
    """

    __tablename__ = "family_members"

    family_id: Mapped[str] = mapped_column(
        ForeignKey("families.id", ondelete="CASCADE"),
        primary_key=True,
        doc="Family this membership belongs to"
    )

    id: Mapped[str] = mapped_column(
        String(128),
        primary_key=True,
        doc="Member ID (same as the user ID)"
    )

    role: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        doc="Role in family: 'owner' or any other label"
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
        doc="Display name shown in calendar event descriptions"
    )

    __table_args__ = (
        Index("idx_family_member_role", "family_id", "role"),
    )

    @property
    def is_owner(self) -> bool:
        return self.role == OWNER_ROLE

    def __repr__(self) -> str:
        return f"<FamilyMember(id='{self.id}', role='{self.role}')>"
