"""
Service layer for Family Calendar.

Provides:
- FamilyStore: document-style access to users, families, members and events
- Event operations: list, insert and delete family events
- Subsystem errors raised by the store and calendar collaborators
"""

from src.services.exceptions import (
    FamilyCalendarError,
    StoreError,
    CalendarError,
)
from src.services.family_store import FamilyStore, SQLAlchemyFamilyStore
from src.services.event_service import (
    EventBooking,
    ServiceResult,
    delete_event,
    generate_event_id,
    insert_event,
    is_schedule_busy,
    list_family_events,
    resolve_family,
)

__all__ = [
    # Errors
    "FamilyCalendarError",
    "StoreError",
    "CalendarError",
    # Store
    "FamilyStore",
    "SQLAlchemyFamilyStore",
    # Event operations
    "EventBooking",
    "ServiceResult",
    "delete_event",
    "generate_event_id",
    "insert_event",
    "is_schedule_busy",
    "list_family_events",
    "resolve_family",
]
