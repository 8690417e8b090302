"""
External service integrations for Family Calendar.

Provides abstraction layer for external calendar backends.
"""

from src.integrations.base import CalendarEvent, CalendarRepository, CreateEventRequest

__all__ = ["CalendarEvent", "CalendarRepository", "CreateEventRequest"]
