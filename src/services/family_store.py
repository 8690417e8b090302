"""
Family document store.

Provides path-addressed access to users, families and the members/events
sub-collections of a family, plus the ordered range queries used for
conflict detection.
"""

import logging
from abc import abstractmethod
from datetime import datetime
from typing import Literal, Optional, Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.events import FamilyEvent
from src.models.family import Family, FamilyMember, User
from src.services.exceptions import StoreError

logger = logging.getLogger(__name__)

EventField = Literal["start", "end"]


class FamilyStore(Protocol):
    """
    Protocol for the family document store.

    Every method raises StoreError when the underlying store fails.
    Missing documents are reported as None, not as errors.
    """

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    async def get_family(self, family_id: str) -> Optional[Family]:
        ...

    @abstractmethod
    async def list_members(self, family_id: str) -> Sequence[FamilyMember]:
        ...

    @abstractmethod
    async def get_member(self, family_id: str, member_id: str) -> Optional[FamilyMember]:
        ...

    @abstractmethod
    async def list_events(self, family_id: str) -> Sequence[FamilyEvent]:
        ...

    @abstractmethod
    async def get_event(self, family_id: str, event_id: str) -> Optional[FamilyEvent]:
        ...

    @abstractmethod
    async def query_events(
        self,
        family_id: str,
        field: EventField,
        start_at: datetime,
        end_at: datetime,
    ) -> Sequence[FamilyEvent]:
        """
        Events whose `field` lies in [start_at, end_at], ordered by `field`.

        Both bounds are inclusive.
        """
        ...

    @abstractmethod
    async def save_event(self, event: FamilyEvent) -> FamilyEvent:
        ...

    @abstractmethod
    async def delete_event(self, event: FamilyEvent) -> None:
        ...


class SQLAlchemyFamilyStore(FamilyStore):
    """
    FamilyStore backed by SQLAlchemy.

    Writes are committed immediately so a failed write surfaces at the call
    site instead of when the request session closes.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_user(self, user_id: str) -> Optional[User]:
        try:
            return await self._session.get(User, user_id)
        except SQLAlchemyError as e:
            raise StoreError("failed to read user data.", original_error=e)

    async def get_family(self, family_id: str) -> Optional[Family]:
        try:
            return await self._session.get(Family, family_id)
        except SQLAlchemyError as e:
            raise StoreError("failed to read family data.", original_error=e)

    async def list_members(self, family_id: str) -> Sequence[FamilyMember]:
        stmt = select(FamilyMember).where(FamilyMember.family_id == family_id)
        try:
            return (await self._session.scalars(stmt)).all()
        except SQLAlchemyError as e:
            raise StoreError("failed to read member data.", original_error=e)

    async def get_member(self, family_id: str, member_id: str) -> Optional[FamilyMember]:
        try:
            return await self._session.get(FamilyMember, (family_id, member_id))
        except SQLAlchemyError as e:
            raise StoreError("failed to read member data.", original_error=e)

    async def list_events(self, family_id: str) -> Sequence[FamilyEvent]:
        stmt = select(FamilyEvent).where(FamilyEvent.family_id == family_id)
        try:
            return (await self._session.scalars(stmt)).all()
        except SQLAlchemyError as e:
            raise StoreError("failed to read event data.", original_error=e)

    async def get_event(self, family_id: str, event_id: str) -> Optional[FamilyEvent]:
        try:
            return await self._session.get(FamilyEvent, (family_id, event_id))
        except SQLAlchemyError as e:
            raise StoreError("failed to read event data.", original_error=e)

    async def query_events(
        self,
        family_id: str,
        field: EventField,
        start_at: datetime,
        end_at: datetime,
    ) -> Sequence[FamilyEvent]:
        column = FamilyEvent.start if field == "start" else FamilyEvent.end
        stmt = (
            select(FamilyEvent)
            .where(
                FamilyEvent.family_id == family_id,
                column >= start_at,
                column <= end_at,
            )
            .order_by(column)
        )
        try:
            return (await self._session.scalars(stmt)).all()
        except SQLAlchemyError as e:
            raise StoreError("failed to read event data.", original_error=e)

    async def save_event(self, event: FamilyEvent) -> FamilyEvent:
        self._session.add(event)
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StoreError("failed to add event.", original_error=e)

        logger.debug(f"Saved event {event.id} in family {event.family_id}")
        return event

    async def delete_event(self, event: FamilyEvent) -> None:
        try:
            await self._session.delete(event)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StoreError("failed to delete event.", original_error=e)

        logger.debug(f"Deleted event {event.id} from family {event.family_id}")
