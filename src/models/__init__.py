"""
SQLAlchemy models for Family Calendar.

This module exports all database models for easy importing and
ensures Alembic can discover them for migrations.
"""

from src.models.base import Base, TimestampMixin, UTCDateTime, utcnow

# Import all models (must be imported for Alembic autogenerate)
from src.models.family import User, Family, FamilyMember, OWNER_ROLE
from src.models.events import FamilyEvent

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UTCDateTime",
    "utcnow",
    # Family models
    "User",
    "Family",
    "FamilyMember",
    "OWNER_ROLE",
    # Event models
    "FamilyEvent",
]
