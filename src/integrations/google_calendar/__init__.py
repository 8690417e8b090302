"""
Google Calendar integration for Family Calendar.

Mirrors family events into the family's shared Google Calendar.
"""

from src.integrations.google_calendar.adapter import GoogleCalendarAdapter
from src.integrations.google_calendar.auth import GoogleAuthManager
from src.integrations.google_calendar.client import GoogleCalendarClient
from src.integrations.google_calendar.exceptions import (
    GoogleCalendarAuthError,
    GoogleCalendarError,
    GoogleCalendarNotFoundError,
    GoogleCalendarQuotaError,
    GoogleCalendarRateLimitError,
)
from src.integrations.google_calendar.repository import GoogleCalendarRepository

__all__ = [
    "GoogleCalendarAdapter",
    "GoogleAuthManager",
    "GoogleCalendarClient",
    "GoogleCalendarError",
    "GoogleCalendarAuthError",
    "GoogleCalendarNotFoundError",
    "GoogleCalendarQuotaError",
    "GoogleCalendarRateLimitError",
    "GoogleCalendarRepository",
]
