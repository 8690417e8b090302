"""
Thin wrapper over the events resource of the Google Calendar API v3.

Only the two calls family events need are exposed: insert and delete.
Each call is made once; HttpError responses are translated into the
GoogleCalendarError hierarchy.
"""

import logging

from google.auth.credentials import Credentials
from googleapiclient.discovery import build, Resource
from googleapiclient.errors import HttpError

from src.integrations.google_calendar.exceptions import (
    GoogleCalendarError,
    GoogleCalendarAuthError,
    GoogleCalendarQuotaError,
    GoogleCalendarNotFoundError,
    GoogleCalendarRateLimitError,
)

logger = logging.getLogger(__name__)

# Delete responses meaning the event is already gone
GONE_STATUSES = (404, 410)

_STATUS_ERRORS = {
    401: (GoogleCalendarAuthError, "Service account credentials were rejected"),
    404: (GoogleCalendarNotFoundError, "Calendar or event not found"),
    429: (GoogleCalendarRateLimitError, "Too many requests to Google Calendar"),
}


def _handle_http_error(error: HttpError) -> None:
    """Raise the GoogleCalendarError subclass matching an HttpError."""
    status = error.resp.status
    detail = str(error)

    if status == 403:
        lowered = detail.lower()
        if "quota" in lowered or "rate limit" in lowered:
            raise GoogleCalendarQuotaError("Calendar API quota exhausted", original_error=error)
        raise GoogleCalendarAuthError(
            "Calendar is not shared with the service account",
            original_error=error,
        )

    if status in _STATUS_ERRORS:
        error_cls, message = _STATUS_ERRORS[status]
        raise error_cls(message, original_error=error)

    raise GoogleCalendarError(
        f"Calendar API returned {status}: {detail}",
        original_error=error,
    )


class GoogleCalendarClient:
    """Synchronous access to one service account's view of Google Calendar."""

    def __init__(self, credentials: Credentials):
        self._service: Resource = build(
            "calendar",
            "v3",
            credentials=credentials,
            cache_discovery=False,
        )

    @property
    def service(self) -> Resource:
        return self._service

    def insert_event(self, calendar_id: str, body: dict) -> dict:
        """
        Insert an event into a calendar.

        Args:
            calendar_id: Target calendar
            body: Event resource in Google Calendar format

        Returns:
            The created event resource, including its generated "id"
        """
        request = self._service.events().insert(calendarId=calendar_id, body=body)
        try:
            created = request.execute()
        except HttpError as e:
            _handle_http_error(e)

        logger.info(f"Inserted calendar event {created.get('id')} into {calendar_id}")
        return created

    def delete_event(self, calendar_id: str, event_id: str) -> None:
        """Remove an event. An event that no longer exists is not an error."""
        request = self._service.events().delete(calendarId=calendar_id, eventId=event_id)
        try:
            request.execute()
        except HttpError as e:
            if e.resp.status not in GONE_STATUSES:
                _handle_http_error(e)
            logger.warning(f"Calendar event {event_id} was already gone from {calendar_id}")
            return

        logger.info(f"Removed calendar event {event_id} from {calendar_id}")
