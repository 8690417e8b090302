"""
Integration test fixtures for Family Calendar.

Drives the real application over ASGI with a real SQLite store and the
in-memory calendar, so requests pass through session authentication,
routing, the event operations and the database.
"""

from typing import AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio

from helpers import FakeCalendarRepository, make_session_cookie
from src.api.dependencies import get_calendar_repository, get_family_store
from src.api.main import app
from src.config import get_settings
from src.services.family_store import SQLAlchemyFamilyStore


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )


@pytest_asyncio.fixture
async def api_client(
    db_session, family, calendar: FakeCalendarRepository
) -> AsyncGenerator[Callable[[str], httpx.AsyncClient], None]:
    """
    Factory for HTTP clients signed in as a given user.

    Usage:
        async with api_client(OWNER_ID) as client:
            response = await client.get("/events")
    """
    app.dependency_overrides[get_family_store] = lambda: SQLAlchemyFamilyStore(db_session)
    app.dependency_overrides[get_calendar_repository] = lambda: calendar
    settings = get_settings()

    def _client(user_id: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://testserver",
            cookies={
                settings.session_cookie_name: make_session_cookie(
                    user_id, settings.session_secret_key
                )
            },
        )

    yield _client

    app.dependency_overrides.clear()


@pytest.fixture
def event_payload() -> dict:
    return {
        "start": "2026-03-01T09:00:00Z",
        "end": "2026-03-01T10:00:00Z",
        "summary": "Dentist",
        "description": "Bring insurance card",
        "userId": "user-alice",
    }
