"""
Pytest configuration and fixtures for Family Calendar tests.

Provides an in-memory async database, a seeded family and an in-memory
calendar repository standing in for Google Calendar.
"""

from datetime import datetime
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from helpers import (
    ALICE_ID,
    BOB_ID,
    CALENDAR_ID,
    FAMILY_ID,
    NO_FAMILY_ID,
    ORPHAN_ID,
    OWNER_ID,
    FakeCalendarRepository,
)
from src.integrations.base import CreateEventRequest
from src.models.base import Base
from src.models.events import FamilyEvent
from src.models.family import Family, FamilyMember, User
from src.services.family_store import SQLAlchemyFamilyStore


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a clean database session for each test.

    Uses an in-memory SQLite database shared through a static pool and torn
    down after each test.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def family(db_session: AsyncSession) -> Family:
    """
    Seed one family with three members.

    - user-owner: owner
    - user-alice, user-bob: plain members
    Also seeds a user without family and a user whose family does not exist.
    """
    family = Family(id=FAMILY_ID, name="Doe family", calendar_id=CALENDAR_ID)
    db_session.add(family)
    db_session.add_all([
        User(id=OWNER_ID, name="Olivia", family_id=FAMILY_ID),
        User(id=ALICE_ID, name="Alice", family_id=FAMILY_ID),
        User(id=BOB_ID, name="Bob", family_id=FAMILY_ID),
        User(id=NO_FAMILY_ID, name="Nobody"),
        User(id=ORPHAN_ID, name="Orphan", family_id="fam-deleted"),
        FamilyMember(family_id=FAMILY_ID, id=OWNER_ID, role="owner", name="Olivia"),
        FamilyMember(family_id=FAMILY_ID, id=ALICE_ID, role="member", name="Alice"),
        FamilyMember(family_id=FAMILY_ID, id=BOB_ID, role="member", name="Bob"),
    ])
    await db_session.commit()
    return family


@pytest.fixture
def store(db_session: AsyncSession) -> SQLAlchemyFamilyStore:
    return SQLAlchemyFamilyStore(db_session)


@pytest.fixture
def calendar() -> FakeCalendarRepository:
    return FakeCalendarRepository()


@pytest_asyncio.fixture
async def seed_event(db_session: AsyncSession, calendar: FakeCalendarRepository):
    """
    Factory fixture storing an event together with its calendar counterpart.

    Usage:
        event = await seed_event("evt-1", creator=ALICE_ID, start=at(9), end=at(10))
    """

    async def _seed(
        event_id: str,
        creator: str,
        start: datetime,
        end: datetime,
        assign_for: Optional[str] = None,
        summary: str = "Swimming",
    ) -> FamilyEvent:
        external = await calendar.create_event(
            CALENDAR_ID,
            CreateEventRequest(title=summary, start_time=start, end_time=end),
        )
        event = FamilyEvent(
            family_id=FAMILY_ID,
            id=event_id,
            creator=creator,
            start=start,
            end=end,
            summary=summary,
            description="",
            assign_for=assign_for or creator,
            event_id=external.id,
        )
        db_session.add(event)
        await db_session.commit()
        return event

    return _seed
