"""
Errors raised by GoogleCalendarClient.

GoogleCalendarRepository converts every one of them into the service-level
CalendarError, so nothing outside this package needs to catch them.
"""


class GoogleCalendarError(Exception):
    """A Google Calendar call failed. Keeps the underlying HttpError, if any."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class GoogleCalendarAuthError(GoogleCalendarError):
    """
    The service account could not act on the calendar.

    Raised for rejected or unloadable credentials and for calendars that
    were never shared with the service account.
    """


class GoogleCalendarQuotaError(GoogleCalendarError):
    """403 caused by an exhausted project quota."""


class GoogleCalendarNotFoundError(GoogleCalendarError):
    """404: the family calendar ID is unknown to Google."""


class GoogleCalendarRateLimitError(GoogleCalendarError):
    """429 from the API."""
