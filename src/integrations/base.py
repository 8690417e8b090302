"""
External calendar interface used by the event operations.

A family's events are mirrored into one external calendar. The operations
only need to create and remove mirrored events, so that is all the
interface offers.
"""

from abc import abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Protocol


@dataclass
class CalendarEvent:
    """An event as stored by the external calendar."""

    id: str
    calendar_id: str
    title: str
    start_time: datetime
    end_time: datetime
    description: Optional[str] = None
    metadata: dict = field(default_factory=dict)


@dataclass
class CreateEventRequest:
    """
    A family event to mirror into the external calendar.

    responsible_name is shown ahead of the description so calendar viewers
    can see which member the event is assigned to.
    """

    title: str
    start_time: datetime
    end_time: datetime
    description: str = ""
    responsible_name: str = ""


class CalendarRepository(Protocol):
    """
    External calendar a family's events are mirrored to.

    Implemented by GoogleCalendarRepository. Failures of either call are
    raised as src.services.exceptions.CalendarError.
    """

    @abstractmethod
    async def create_event(
        self,
        calendar_id: str,
        event: CreateEventRequest,
    ) -> CalendarEvent:
        """Create the event and return it with the calendar's own ID."""
        ...

    @abstractmethod
    async def delete_event(
        self,
        calendar_id: str,
        event_id: str,
    ) -> None:
        """Remove the event with the calendar's own ID."""
        ...
