"""
Unit tests for the family event operations.

Run against a real in-memory SQLite store and an in-memory calendar.
"""

import string
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.auth.exceptions import RefreshError

from helpers import (
    ALICE_ID,
    BOB_ID,
    CALENDAR_ID,
    FAMILY_ID,
    NO_FAMILY_ID,
    ORPHAN_ID,
    OWNER_ID,
    at,
)
from src.integrations.google_calendar.repository import GoogleCalendarRepository
from src.models.family import User
from src.services.event_service import (
    EventBooking,
    MSG_EVENT_NOT_FOUND,
    MSG_FAMILY_NOT_FOUND,
    MSG_FORBIDDEN,
    MSG_NO_FAMILY,
    MSG_SCHEDULE_EXISTS,
    ServiceResult,
    delete_event,
    generate_event_id,
    insert_event,
    is_schedule_busy,
    list_family_events,
)
from src.services.exceptions import StoreError


def booking(start, end, assign_for=ALICE_ID, summary="Dentist", description="Bring card"):
    return EventBooking(
        start=start,
        end=end,
        summary=summary,
        description=description,
        assign_for=assign_for,
    )


class TestGenerateEventId:
    """Tests for event ID generation."""

    def test_length_is_16(self):
        assert len(generate_event_id()) == 16

    def test_url_safe_characters(self):
        allowed = set(string.ascii_letters + string.digits + "-_")
        assert set(generate_event_id()) <= allowed

    def test_ids_differ(self):
        assert len({generate_event_id() for _ in range(50)}) == 50


class TestServiceResult:
    """Tests for ServiceResult status mapping."""

    def test_success_status(self):
        result = ServiceResult(status_code=201, message="ok")
        assert result.status == "success"
        assert result.ok is True

    def test_fail_status(self):
        result = ServiceResult(status_code=404, message="missing")
        assert result.status == "fail"
        assert result.ok is False


class TestFamilyResolution:
    """Every operation answers 404 before touching the family's sub-collections."""

    @pytest.fixture
    def mock_store(self):
        store = MagicMock()
        store.get_user = AsyncMock(return_value=User(id=NO_FAMILY_ID, family_id=None))
        store.get_family = AsyncMock()
        store.list_events = AsyncMock()
        store.list_members = AsyncMock()
        store.get_member = AsyncMock()
        store.get_event = AsyncMock()
        store.query_events = AsyncMock()
        store.save_event = AsyncMock()
        store.delete_event = AsyncMock()
        return store

    def _assert_untouched(self, store, calendar):
        store.get_family.assert_not_awaited()
        store.list_events.assert_not_awaited()
        store.list_members.assert_not_awaited()
        store.get_event.assert_not_awaited()
        store.query_events.assert_not_awaited()
        store.save_event.assert_not_awaited()
        store.delete_event.assert_not_awaited()
        assert calendar.create_requests == []
        assert calendar.delete_requests == []

    @pytest.mark.asyncio
    async def test_list_without_family(self, mock_store, calendar):
        result = await list_family_events(mock_store, NO_FAMILY_ID)

        assert result.status_code == 404
        assert result.message == MSG_NO_FAMILY
        self._assert_untouched(mock_store, calendar)

    @pytest.mark.asyncio
    async def test_insert_without_family(self, mock_store, calendar):
        result = await insert_event(mock_store, calendar, NO_FAMILY_ID, booking(at(9), at(10)))

        assert result.status_code == 404
        assert result.message == MSG_NO_FAMILY
        self._assert_untouched(mock_store, calendar)

    @pytest.mark.asyncio
    async def test_delete_without_family(self, mock_store, calendar):
        result = await delete_event(mock_store, calendar, NO_FAMILY_ID, "evt-1")

        assert result.status_code == 404
        assert result.message == MSG_NO_FAMILY
        self._assert_untouched(mock_store, calendar)

    @pytest.mark.asyncio
    async def test_unknown_user_has_no_family(self, mock_store, calendar):
        mock_store.get_user.return_value = None

        result = await list_family_events(mock_store, "ghost")

        assert result.status_code == 404
        assert result.message == MSG_NO_FAMILY

    @pytest.mark.asyncio
    async def test_missing_family_document(self, store, family, calendar):
        for result in (
            await list_family_events(store, ORPHAN_ID),
            await insert_event(store, calendar, ORPHAN_ID, booking(at(9), at(10))),
            await delete_event(store, calendar, ORPHAN_ID, "evt-1"),
        ):
            assert result.status_code == 404
            assert result.message == MSG_FAMILY_NOT_FOUND

        assert calendar.create_requests == []


class TestListFamilyEvents:
    """Tests for listing a family's events."""

    @pytest.mark.asyncio
    async def test_returns_family_members_and_events(self, store, family, seed_event):
        await seed_event("evt-1", creator=ALICE_ID, start=at(9), end=at(10))

        result = await list_family_events(store, ALICE_ID)

        assert result.status_code == 200
        assert result.data["id"] == FAMILY_ID
        assert result.data["body"]["calendarId"] == CALENDAR_ID
        assert sorted(result.data["members"], key=lambda m: m["id"]) == [
            {"id": ALICE_ID, "role": "member"},
            {"id": BOB_ID, "role": "member"},
            {"id": OWNER_ID, "role": "owner"},
        ]
        assert len(result.data["events"]) == 1
        event = result.data["events"][0]
        assert event["id"] == "evt-1"
        assert event["body"]["creator"] == ALICE_ID
        assert event["body"]["eventId"] == "gcal-1"
        assert event["body"]["start"] == "2026-03-01T09:00:00+00:00"

    @pytest.mark.asyncio
    async def test_empty_family(self, store, family):
        result = await list_family_events(store, OWNER_ID)

        assert result.status_code == 200
        assert result.data["events"] == []

    @pytest.mark.asyncio
    async def test_store_failure(self, store, family, monkeypatch):
        monkeypatch.setattr(
            store, "list_events", AsyncMock(side_effect=StoreError("failed to read event data."))
        )

        result = await list_family_events(store, OWNER_ID)

        assert result.status_code == 500
        assert result.message == "Database Error: failed to read event data."


class TestIsScheduleBusy:
    """Tests for the interval-overlap check."""

    @pytest.mark.asyncio
    async def test_no_events(self, store, family):
        assert await is_schedule_busy(store, FAMILY_ID, ALICE_ID, at(9), at(10)) is False

    @pytest.mark.asyncio
    async def test_event_starting_inside(self, store, family, seed_event):
        await seed_event("evt-1", creator=ALICE_ID, start=at(9, 30), end=at(11))

        assert await is_schedule_busy(store, FAMILY_ID, ALICE_ID, at(9), at(10)) is True

    @pytest.mark.asyncio
    async def test_event_ending_inside(self, store, family, seed_event):
        await seed_event("evt-1", creator=ALICE_ID, start=at(8), end=at(9, 30))

        assert await is_schedule_busy(store, FAMILY_ID, ALICE_ID, at(9), at(10)) is True

    @pytest.mark.asyncio
    async def test_identical_interval(self, store, family, seed_event):
        await seed_event("evt-1", creator=ALICE_ID, start=at(9), end=at(10))

        assert await is_schedule_busy(store, FAMILY_ID, ALICE_ID, at(9), at(10)) is True

    @pytest.mark.asyncio
    async def test_touching_intervals_do_not_conflict(self, store, family, seed_event):
        await seed_event("evt-before", creator=ALICE_ID, start=at(8), end=at(9))
        await seed_event("evt-after", creator=ALICE_ID, start=at(10), end=at(11))

        assert await is_schedule_busy(store, FAMILY_ID, ALICE_ID, at(9), at(10)) is False

    @pytest.mark.asyncio
    async def test_only_callers_assignments_count(self, store, family, seed_event):
        await seed_event("evt-1", creator=ALICE_ID, start=at(9), end=at(10), assign_for=BOB_ID)

        assert await is_schedule_busy(store, FAMILY_ID, ALICE_ID, at(9), at(10)) is False
        assert await is_schedule_busy(store, FAMILY_ID, BOB_ID, at(9), at(10)) is True

    @pytest.mark.asyncio
    async def test_busy_if_any_match(self, store, family, seed_event):
        """A match is not overridden by later non-matching events."""
        await seed_event("evt-1", creator=ALICE_ID, start=at(9), end=at(9, 30))
        await seed_event("evt-2", creator=BOB_ID, start=at(9, 30), end=at(9, 45))

        assert await is_schedule_busy(store, FAMILY_ID, ALICE_ID, at(9), at(10)) is True

    @pytest.mark.asyncio
    async def test_enclosing_event_is_not_detected(self, store, family, seed_event):
        """An event that strictly contains the interval is matched by neither query."""
        await seed_event("evt-1", creator=ALICE_ID, start=at(8), end=at(12))

        assert await is_schedule_busy(store, FAMILY_ID, ALICE_ID, at(9), at(10)) is False


class TestInsertEvent:
    """Tests for booking events."""

    @pytest.mark.asyncio
    async def test_creates_calendar_and_local_event(self, store, family, calendar):
        result = await insert_event(
            store, calendar, OWNER_ID, booking(at(9), at(10), assign_for=ALICE_ID)
        )

        assert result.status_code == 201
        assert result.data == {
            "creator": OWNER_ID,
            "start": "2026-03-01T09:00:00+00:00",
            "end": "2026-03-01T10:00:00+00:00",
            "summary": "Dentist",
            "description": "Bring card",
            "assignFor": ALICE_ID,
            "eventId": "gcal-1",
        }

        calendar_id, request = calendar.create_requests[0]
        assert calendar_id == CALENDAR_ID
        assert request.title == "Dentist"
        assert request.responsible_name == "Alice"
        assert calendar.events[(CALENDAR_ID, "gcal-1")].description == (
            "<strong>Alice</strong><p>Bring card</p>"
        )

        stored = await store.list_events(FAMILY_ID)
        assert len(stored) == 1
        assert len(stored[0].id) == 16
        assert stored[0].event_id == "gcal-1"

    @pytest.mark.asyncio
    async def test_back_to_back_bookings(self, store, family, calendar):
        first = await insert_event(store, calendar, ALICE_ID, booking(at(9), at(10)))
        second = await insert_event(store, calendar, ALICE_ID, booking(at(10), at(11)))

        assert first.status_code == 201
        assert second.status_code == 201
        assert len(await store.list_events(FAMILY_ID)) == 2

    @pytest.mark.asyncio
    async def test_overlapping_booking_rejected(self, store, family, calendar):
        first = await insert_event(store, calendar, ALICE_ID, booking(at(9), at(11)))
        second = await insert_event(store, calendar, ALICE_ID, booking(at(10), at(12)))

        assert first.status_code == 201
        assert second.status_code == 400
        assert second.message == MSG_SCHEDULE_EXISTS
        assert len(calendar.create_requests) == 1
        assert len(await store.list_events(FAMILY_ID)) == 1

    @pytest.mark.asyncio
    async def test_conflict_checks_caller_not_assignee(self, store, family, calendar, seed_event):
        """The new assignee's bookings are not checked, only the caller's."""
        await seed_event("evt-1", creator=ALICE_ID, start=at(9), end=at(10), assign_for=BOB_ID)

        for_bob = await insert_event(
            store, calendar, ALICE_ID, booking(at(9), at(10), assign_for=BOB_ID)
        )
        by_bob = await insert_event(
            store, calendar, BOB_ID, booking(at(9, 30), at(10, 30), assign_for=ALICE_ID)
        )

        assert for_bob.status_code == 201
        assert by_bob.status_code == 400

    @pytest.mark.asyncio
    async def test_calendar_failure_leaves_no_local_event(self, store, family, calendar):
        calendar.fail_create = True

        result = await insert_event(store, calendar, ALICE_ID, booking(at(9), at(10)))

        assert result.status_code == 500
        assert result.message == "Google Calendar Error: failed to add event."
        assert await store.list_events(FAMILY_ID) == []

    @pytest.mark.asyncio
    async def test_store_failure_keeps_calendar_event(self, store, family, calendar, monkeypatch):
        """A failed local write does not roll back the calendar insert."""
        monkeypatch.setattr(
            store, "save_event", AsyncMock(side_effect=StoreError("failed to add event."))
        )

        result = await insert_event(store, calendar, ALICE_ID, booking(at(9), at(10)))

        assert result.status_code == 500
        assert result.message == "Database Error: failed to add event."
        assert calendar.has_event("gcal-1")

    @pytest.mark.asyncio
    async def test_unknown_responsible_member(self, store, family, calendar):
        result = await insert_event(
            store, calendar, ALICE_ID, booking(at(9), at(10), assign_for="user-stranger")
        )

        assert result.status_code == 500
        assert "user-stranger" in result.message
        assert calendar.create_requests == []

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_raw_message(self, store, family, calendar, monkeypatch):
        monkeypatch.setattr(store, "get_member", AsyncMock(side_effect=RuntimeError("boom")))

        result = await insert_event(store, calendar, ALICE_ID, booking(at(9), at(10)))

        assert result.status_code == 500
        assert result.message == "boom"


class TestDeleteEvent:
    """Tests for deleting events."""

    @pytest.mark.asyncio
    async def test_event_not_found(self, store, family, calendar):
        result = await delete_event(store, calendar, OWNER_ID, "missing")

        assert result.status_code == 404
        assert result.message == MSG_EVENT_NOT_FOUND
        assert calendar.delete_requests == []

    @pytest.mark.asyncio
    async def test_non_creator_non_owner_forbidden(self, store, family, calendar, seed_event):
        await seed_event("evt-1", creator=ALICE_ID, start=at(9), end=at(10))

        result = await delete_event(store, calendar, BOB_ID, "evt-1")

        assert result.status_code == 403
        assert result.message == MSG_FORBIDDEN
        assert await store.get_event(FAMILY_ID, "evt-1") is not None
        assert calendar.has_event("gcal-1")
        assert calendar.delete_requests == []

    @pytest.mark.asyncio
    async def test_creator_can_delete(self, store, family, calendar, seed_event):
        await seed_event("evt-1", creator=ALICE_ID, start=at(9), end=at(10))

        result = await delete_event(store, calendar, ALICE_ID, "evt-1")

        assert result.status_code == 200
        assert result.data is None
        assert await store.get_event(FAMILY_ID, "evt-1") is None
        assert not calendar.has_event("gcal-1")

    @pytest.mark.asyncio
    async def test_owner_can_delete_any_event(self, store, family, calendar, seed_event):
        await seed_event("evt-1", creator=BOB_ID, start=at(9), end=at(10))

        result = await delete_event(store, calendar, OWNER_ID, "evt-1")

        assert result.status_code == 200
        assert await store.get_event(FAMILY_ID, "evt-1") is None
        assert calendar.delete_requests == [(CALENDAR_ID, "gcal-1")]

    @pytest.mark.asyncio
    async def test_calendar_failure_keeps_local_event(self, store, family, calendar, seed_event):
        await seed_event("evt-1", creator=ALICE_ID, start=at(9), end=at(10))
        calendar.fail_delete = True

        result = await delete_event(store, calendar, ALICE_ID, "evt-1")

        assert result.status_code == 500
        assert result.message == "Google Calendar Error: failed to delete event."
        assert await store.get_event(FAMILY_ID, "evt-1") is not None

    @pytest.mark.asyncio
    async def test_store_failure_after_calendar_delete(
        self, store, family, calendar, seed_event, monkeypatch
    ):
        """The calendar event is already gone when the local delete fails."""
        await seed_event("evt-1", creator=ALICE_ID, start=at(9), end=at(10))
        monkeypatch.setattr(
            store, "delete_event", AsyncMock(side_effect=StoreError("failed to delete event."))
        )

        result = await delete_event(store, calendar, ALICE_ID, "evt-1")

        assert result.status_code == 500
        assert result.message == "Database Error: failed to delete event."
        assert not calendar.has_event("gcal-1")
        assert await store.get_event(FAMILY_ID, "evt-1") is not None


class TestGoogleCalendarFailures:
    """Credential refresh and network failures from the Google client reach the caller as 500s."""

    @pytest.fixture
    def google_client(self):
        return MagicMock()

    @pytest.fixture
    def google_calendar(self, google_client):
        repo = GoogleCalendarRepository(
            auth_manager=MagicMock(),
            executor=ThreadPoolExecutor(max_workers=1),
        )
        repo._client = google_client
        yield repo
        repo.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [RefreshError("token refresh failed"), OSError("timed out")],
        ids=["refresh", "network"],
    )
    async def test_insert_reports_calendar_error(
        self, store, family, google_calendar, google_client, error
    ):
        google_client.insert_event.side_effect = error

        result = await insert_event(store, google_calendar, ALICE_ID, booking(at(9), at(10)))

        assert result.status_code == 500
        assert result.message == "Google Calendar Error: failed to add event."
        assert await store.list_events(FAMILY_ID) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [RefreshError("token refresh failed"), OSError("timed out")],
        ids=["refresh", "network"],
    )
    async def test_delete_reports_calendar_error(
        self, store, family, seed_event, google_calendar, google_client, error
    ):
        await seed_event("evt-1", creator=ALICE_ID, start=at(9), end=at(10))
        google_client.delete_event.side_effect = error

        result = await delete_event(store, google_calendar, ALICE_ID, "evt-1")

        assert result.status_code == 500
        assert result.message == "Google Calendar Error: failed to delete event."
        assert await store.get_event(FAMILY_ID, "evt-1") is not None
