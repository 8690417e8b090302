"""
Shared test data and doubles for Family Calendar tests.

Imported by the conftest fixtures and by test modules that need the seeded
IDs or the in-memory calendar directly.
"""

import base64
import json
from datetime import datetime, timezone

from itsdangerous import TimestampSigner

from src.integrations.base import CalendarEvent, CreateEventRequest
from src.integrations.google_calendar.adapter import GoogleCalendarAdapter
from src.services.exceptions import CalendarError

FAMILY_ID = "fam-1"
CALENDAR_ID = "family-cal@group.calendar.google.com"

OWNER_ID = "user-owner"
ALICE_ID = "user-alice"
BOB_ID = "user-bob"
NO_FAMILY_ID = "user-no-family"
ORPHAN_ID = "user-orphan"


def at(hour: int, minute: int = 0, day: int = 1) -> datetime:
    """UTC timestamp on March `day`, 2026."""
    return datetime(2026, 3, day, hour, minute, tzinfo=timezone.utc)


class FakeCalendarRepository:
    """
    In-memory CalendarRepository.

    Records every create request and keeps created events until deleted.
    Set fail_create / fail_delete to simulate Google Calendar outages.
    """

    def __init__(self):
        self.events: dict[tuple[str, str], CalendarEvent] = {}
        self.create_requests: list[tuple[str, CreateEventRequest]] = []
        self.delete_requests: list[tuple[str, str]] = []
        self.fail_create = False
        self.fail_delete = False
        self._counter = 0

    async def create_event(self, calendar_id: str, event: CreateEventRequest) -> CalendarEvent:
        self.create_requests.append((calendar_id, event))
        if self.fail_create:
            raise CalendarError("failed to add event.")

        self._counter += 1
        created = CalendarEvent(
            id=f"gcal-{self._counter}",
            calendar_id=calendar_id,
            title=event.title,
            start_time=event.start_time,
            end_time=event.end_time,
            description=GoogleCalendarAdapter.format_description(
                event.responsible_name, event.description
            ),
        )
        self.events[(calendar_id, created.id)] = created
        return created

    async def delete_event(self, calendar_id: str, event_id: str) -> None:
        self.delete_requests.append((calendar_id, event_id))
        if self.fail_delete:
            raise CalendarError("failed to delete event.")
        self.events.pop((calendar_id, event_id), None)

    def has_event(self, event_id: str, calendar_id: str = CALENDAR_ID) -> bool:
        return (calendar_id, event_id) in self.events


def make_session_cookie(user_id: str, secret_key: str) -> str:
    """Build a signed session cookie the way Starlette's SessionMiddleware does."""
    payload = base64.b64encode(json.dumps({"user_id": user_id}).encode("utf-8"))
    return TimestampSigner(secret_key).sign(payload).decode("utf-8")
