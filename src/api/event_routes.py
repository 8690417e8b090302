"""
Family event API routes.

1. GET /events - List the caller's family, members and events
2. POST /events - Book a new event and mirror it to Google Calendar
3. DELETE /events/{event_id} - Delete an event and its Google Calendar copy

All routes require an authenticated session.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.api.dependencies import (
    get_calendar_repository,
    get_current_user_id,
    get_family_store,
)
from src.api.models import (
    EnvelopeResponse,
    EventCreatedResponse,
    FamilyEventsResponse,
    InsertEventRequest,
)
from src.api.response_builder import build_response
from src.integrations.base import CalendarRepository
from src.services import event_service
from src.services.event_service import EventBooking
from src.services.family_store import FamilyStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["Events"])

_FAILURES = {
    401: {"model": EnvelopeResponse, "description": "Not authenticated"},
    404: {"model": EnvelopeResponse, "description": "No family, family missing or event missing"},
    500: {"model": EnvelopeResponse, "description": "Database or Google Calendar failure"},
}


@router.get(
    "",
    summary="List family events",
    responses={200: {"model": FamilyEventsResponse}, **_FAILURES},
)
async def list_events(
    user_id: str = Depends(get_current_user_id),
    store: FamilyStore = Depends(get_family_store),
) -> JSONResponse:
    """Return the caller's family with all members (id and role) and all events."""
    result = await event_service.list_family_events(store, caller_id=user_id)
    return build_response(result)


@router.post(
    "",
    summary="Create event",
    status_code=201,
    responses={
        201: {"model": EventCreatedResponse},
        400: {"model": EnvelopeResponse, "description": "Caller already has an event in this interval"},
        **_FAILURES,
    },
)
async def create_event(
    request: InsertEventRequest,
    user_id: str = Depends(get_current_user_id),
    store: FamilyStore = Depends(get_family_store),
    calendar: CalendarRepository = Depends(get_calendar_repository),
) -> JSONResponse:
    """
    Book an event for a family member.

    Rejected with 400 when the caller already has an event assigned to them
    that overlaps the interval. Touching intervals do not overlap.
    """
    logger.info(
        f"Creating event for user {user_id}: '{request.summary[:50]}' "
        f"assigned to {request.user_id}"
    )

    booking = EventBooking(
        start=request.start,
        end=request.end,
        summary=request.summary,
        description=request.description,
        assign_for=request.user_id,
    )
    result = await event_service.insert_event(store, calendar, caller_id=user_id, booking=booking)
    return build_response(result)


@router.delete(
    "/{event_id}",
    summary="Delete event",
    responses={
        200: {"model": EnvelopeResponse},
        403: {"model": EnvelopeResponse, "description": "Caller is neither creator nor owner"},
        **_FAILURES,
    },
)
async def delete_event(
    event_id: str,
    user_id: str = Depends(get_current_user_id),
    store: FamilyStore = Depends(get_family_store),
    calendar: CalendarRepository = Depends(get_calendar_repository),
) -> JSONResponse:
    """Delete an event. Only its creator or a family owner may do this."""
    logger.info(f"Deleting event {event_id} for user {user_id}")

    result = await event_service.delete_event(store, calendar, caller_id=user_id, event_id=event_id)
    return build_response(result)
