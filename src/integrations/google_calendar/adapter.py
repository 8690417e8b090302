"""
Conversion between family event requests and Google Calendar event resources.

All times are sent to Google as RFC 3339 in UTC. The responsible member is
written into the description as a small HTML fragment, which Google Calendar
renders in its event view.
"""

from datetime import datetime, timezone
from html import escape

from dateutil.parser import parse as parse_datetime

from src.integrations.base import CalendarEvent, CreateEventRequest


class GoogleCalendarAdapter:
    """Builds Google event bodies and reads Google events back."""

    @staticmethod
    def format_description(responsible_name: str, description: str) -> str:
        """`<strong>name</strong><p>description</p>`, both parts HTML-escaped."""
        return f"<strong>{escape(responsible_name)}</strong><p>{escape(description)}</p>"

    @staticmethod
    def to_google_event(event: CreateEventRequest) -> dict:
        """Event resource body for events().insert."""
        return {
            "summary": event.title,
            "description": GoogleCalendarAdapter.format_description(
                event.responsible_name, event.description
            ),
            "start": {"dateTime": _format_datetime(event.start_time), "timeZone": "UTC"},
            "end": {"dateTime": _format_datetime(event.end_time), "timeZone": "UTC"},
        }

    @staticmethod
    def from_google_event(google_event: dict, calendar_id: str) -> CalendarEvent:
        """
        Read an event resource returned by the API.

        Timed events carry "dateTime"; all-day events only carry "date" and
        are read as midnight UTC.
        """
        start = google_event.get("start", {})
        end = google_event.get("end", {})

        return CalendarEvent(
            id=google_event.get("id", ""),
            calendar_id=calendar_id,
            title=google_event.get("summary", "Untitled"),
            description=google_event.get("description"),
            start_time=_parse_datetime(start.get("dateTime") or start.get("date", "")),
            end_time=_parse_datetime(end.get("dateTime") or end.get("date", "")),
            metadata={
                "etag": google_event.get("etag"),
                "html_link": google_event.get("htmlLink"),
            },
        )


def _format_datetime(dt: datetime) -> str:
    """RFC 3339 in UTC. Naive values are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc).isoformat()
    return dt.astimezone(timezone.utc).isoformat()


def _parse_datetime(value: str) -> datetime:
    """Parse an API timestamp or date, tagging naive results as UTC."""
    dt = parse_datetime(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
