"""
Google Calendar backed CalendarRepository.

The googleapiclient is blocking, so each call runs on a small thread pool
owned by the repository. One repository is created per process at startup
and closed on shutdown.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, TypeVar

from src.integrations.base import (
    CalendarEvent,
    CalendarRepository,
    CreateEventRequest,
)
from src.integrations.google_calendar.adapter import GoogleCalendarAdapter
from src.integrations.google_calendar.auth import GoogleAuthManager
from src.integrations.google_calendar.client import GoogleCalendarClient
from src.services.exceptions import CalendarError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GoogleCalendarRepository(CalendarRepository):
    """
    Mirrors family events into Google Calendar via a service account.

    The API client is built on first use, so a missing or broken service
    account only surfaces when an event is written.
    """

    def __init__(
        self,
        auth_manager: GoogleAuthManager,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self._auth_manager = auth_manager
        self._executor = executor or ThreadPoolExecutor(
            max_workers=4, thread_name_prefix="gcal"
        )
        self._client: Optional[GoogleCalendarClient] = None
        self._adapter = GoogleCalendarAdapter()

    @property
    def client(self) -> GoogleCalendarClient:
        if self._client is None:
            self._client = GoogleCalendarClient(self._auth_manager.get_credentials())
        return self._client

    async def _call(self, fn: Callable[[GoogleCalendarClient], T]) -> T:
        """Run fn(client) on the thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, lambda: fn(self.client))

    async def create_event(
        self,
        calendar_id: str,
        event: CreateEventRequest,
    ) -> CalendarEvent:
        """
        Insert the event into the family calendar.

        Raises:
            CalendarError: Any failure of the insert, including credential
                refresh and transport errors
        """
        body = self._adapter.to_google_event(event)

        try:
            created = await self._call(lambda c: c.insert_event(calendar_id, body))
            return self._adapter.from_google_event(created, calendar_id)
        except Exception as e:
            logger.error(f"Calendar insert into {calendar_id} failed: {e}", exc_info=True)
            raise CalendarError("failed to add event.", original_error=e)

    async def delete_event(
        self,
        calendar_id: str,
        event_id: str,
    ) -> None:
        """
        Remove the event from the family calendar.

        Raises:
            CalendarError: Any failure of the delete, including credential
                refresh and transport errors
        """
        try:
            await self._call(lambda c: c.delete_event(calendar_id, event_id))
        except Exception as e:
            logger.error(
                f"Calendar delete of {event_id} from {calendar_id} failed: {e}",
                exc_info=True,
            )
            raise CalendarError("failed to delete event.", original_error=e)

    def close(self) -> None:
        """Stop accepting calendar calls and release the worker threads."""
        self._executor.shutdown(wait=False)
