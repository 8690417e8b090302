"""
Family event operations: list, insert and delete.

Each operation resolves the caller's family, works on the family's members
and events, and returns a ServiceResult instead of raising. Store and
calendar failures are raised by the collaborators, caught once per
operation and mapped to a 500 result whose message names the subsystem.

Events are written to two independent systems. Neither operation
compensates a half-finished write:
- insert creates the Google Calendar event first, so a failed local write
  leaves an orphan calendar event;
- delete removes the Google Calendar event first, so a failed local delete
  leaves a local event whose calendar counterpart is gone.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional, Union

from src.integrations.base import CalendarRepository, CreateEventRequest
from src.models.events import FamilyEvent
from src.models.family import Family
from src.services.exceptions import FamilyCalendarError
from src.services.family_store import FamilyStore

logger = logging.getLogger(__name__)

# Shrink applied to both ends of the conflict window so back-to-back
# bookings do not collide.
BOUNDARY_TOLERANCE = timedelta(seconds=1)

EVENT_ID_BYTES = 12  # 16 URL-safe characters

MSG_NO_FAMILY = "User has no family data."
MSG_FAMILY_NOT_FOUND = "Family data not found."
MSG_EVENT_NOT_FOUND = "Event data not found."
MSG_SCHEDULE_EXISTS = "Schedule already exists."
MSG_FORBIDDEN = "Not authorized to perform this action."
MSG_LISTED = "Event data retrieved successfully."
MSG_CREATED = "Event added successfully."
MSG_DELETED = "Event data deleted successfully."


@dataclass
class ServiceResult:
    """Outcome of an event operation, ready to be framed as an HTTP response."""

    status_code: int
    message: str
    data: Optional[Any] = None

    @property
    def status(self) -> str:
        return "success" if self.status_code < 400 else "fail"

    @property
    def ok(self) -> bool:
        return self.status_code < 400


@dataclass
class EventBooking:
    """Validated input for a new event. start < end is guaranteed by the caller."""

    start: datetime
    end: datetime
    summary: str
    description: str
    assign_for: str


def generate_event_id() -> str:
    """Random 16-character URL-safe identifier for a new event."""
    return secrets.token_urlsafe(EVENT_ID_BYTES)


def _fail(status_code: int, message: str) -> ServiceResult:
    return ServiceResult(status_code=status_code, message=message)


def _failure_result(error: Exception, action: str) -> ServiceResult:
    """Map an exception caught by an operation to a 500 result."""
    if isinstance(error, FamilyCalendarError):
        logger.error(f"{action} failed: {error.public_message}", exc_info=True)
        return _fail(500, error.public_message)

    logger.error(f"{action} failed with unexpected error: {error}", exc_info=True)
    return _fail(500, str(error))


async def resolve_family(
    store: FamilyStore,
    caller_id: str,
) -> Union[Family, ServiceResult]:
    """
    Find the caller's family.

    Returns:
        The Family, or a 404 result when the caller has no family reference
        or the referenced family does not exist
    """
    user = await store.get_user(caller_id)
    if user is None or not user.family_id:
        return _fail(404, MSG_NO_FAMILY)

    family = await store.get_family(user.family_id)
    if family is None:
        return _fail(404, MSG_FAMILY_NOT_FOUND)

    return family


async def is_schedule_busy(
    store: FamilyStore,
    family_id: str,
    caller_id: str,
    start: datetime,
    end: datetime,
) -> bool:
    """
    Check whether the caller already has an event overlapping [start, end].

    Two range queries find events that start inside [start, end - 1s] or
    end inside [start + 1s, end]. An event counts only if it is assigned to
    the caller. Note that the assignee of the new event is not checked, and
    an existing event that strictly contains the new interval is matched by
    neither query.
    """
    starting_inside = await store.query_events(
        family_id, "start", start, end - BOUNDARY_TOLERANCE
    )
    ending_inside = await store.query_events(
        family_id, "end", start + BOUNDARY_TOLERANCE, end
    )

    return any(
        event.assign_for == caller_id
        for event in (*starting_inside, *ending_inside)
    )


async def list_family_events(store: FamilyStore, caller_id: str) -> ServiceResult:
    """
    Return the caller's family with all of its members and events.

    Members are reduced to id and role; events carry their full body.
    """
    try:
        family = await resolve_family(store, caller_id)
        if isinstance(family, ServiceResult):
            return family

        events = await store.list_events(family.id)
        members = await store.list_members(family.id)
    except Exception as e:
        return _failure_result(e, "Listing events")

    return ServiceResult(
        status_code=200,
        message=MSG_LISTED,
        data={
            "id": family.id,
            "body": family.to_body(),
            "members": [{"id": m.id, "role": m.role} for m in members],
            "events": [{"id": e.id, "body": e.to_body()} for e in events],
        },
    )


async def insert_event(
    store: FamilyStore,
    calendar: CalendarRepository,
    caller_id: str,
    booking: EventBooking,
) -> ServiceResult:
    """
    Book a new family event and mirror it to the family calendar.

    Order of operations:
    1. resolve family (404)
    2. reject if the caller is busy in the interval (400)
    3. insert into Google Calendar
    4. write the local event with the returned calendar event id (201)
    """
    try:
        family = await resolve_family(store, caller_id)
        if isinstance(family, ServiceResult):
            return family

        if await is_schedule_busy(store, family.id, caller_id, booking.start, booking.end):
            logger.info(
                f"Rejected booking for {caller_id} in family {family.id}: "
                f"{booking.start.isoformat()} - {booking.end.isoformat()} overlaps"
            )
            return _fail(400, MSG_SCHEDULE_EXISTS)

        responsible = await store.get_member(family.id, booking.assign_for)
        if responsible is None:
            return _fail(500, f"Member {booking.assign_for} not found in family.")

        calendar_event = await calendar.create_event(
            family.calendar_id,
            CreateEventRequest(
                title=booking.summary,
                start_time=booking.start,
                end_time=booking.end,
                description=booking.description,
                responsible_name=responsible.name,
            ),
        )
        logger.info(f"Created calendar event {calendar_event.id} for family {family.id}")

        event = FamilyEvent(
            family_id=family.id,
            id=generate_event_id(),
            creator=caller_id,
            start=booking.start,
            end=booking.end,
            summary=booking.summary,
            description=booking.description,
            assign_for=booking.assign_for,
            event_id=calendar_event.id,
        )
        event = await store.save_event(event)
    except Exception as e:
        return _failure_result(e, "Adding event")

    logger.info(f"Added event {event.id} to family {family.id}")
    return ServiceResult(status_code=201, message=MSG_CREATED, data=event.to_body())


async def delete_event(
    store: FamilyStore,
    calendar: CalendarRepository,
    caller_id: str,
    event_id: str,
) -> ServiceResult:
    """
    Delete a family event and its Google Calendar counterpart.

    The caller must be the event's creator or an owner of the family.
    """
    try:
        family = await resolve_family(store, caller_id)
        if isinstance(family, ServiceResult):
            return family

        event = await store.get_event(family.id, event_id)
        if event is None:
            return _fail(404, MSG_EVENT_NOT_FOUND)

        if event.creator != caller_id:
            member = await store.get_member(family.id, caller_id)
            if member is None or not member.is_owner:
                logger.info(f"User {caller_id} may not delete event {event_id}")
                return _fail(403, MSG_FORBIDDEN)

        await calendar.delete_event(family.calendar_id, event.event_id)
        await store.delete_event(event)
    except Exception as e:
        return _failure_result(e, "Deleting event")

    logger.info(f"Deleted event {event_id} from family {family.id}")
    return ServiceResult(status_code=200, message=MSG_DELETED)
