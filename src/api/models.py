"""
Pydantic request and response models for the Family Calendar API.

Response models document the envelope returned by every event endpoint:
{"statusCode", "status", "message", "data"}.
"""

from datetime import datetime, timezone
from typing import Literal, Optional, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# Request Models
# =============================================================================


class InsertEventRequest(BaseModel):
    """Request to book a new family event."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "start": "2026-03-01T09:00:00Z",
                "end": "2026-03-01T10:00:00Z",
                "summary": "Dentist",
                "description": "Bring insurance card",
                "userId": "user-2",
            }
        },
    )

    start: datetime = Field(..., description="Event start (ISO 8601)")
    end: datetime = Field(..., description="Event end (ISO 8601), after start")
    summary: str = Field(..., min_length=1, description="Event title")
    description: str = Field(..., min_length=1, description="Event description")
    user_id: str = Field(
        ...,
        alias="userId",
        min_length=1,
        description="Family member responsible for the event",
    )

    @field_validator("start", "end")
    @classmethod
    def normalize_to_utc(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @model_validator(mode="after")
    def validate_start_before_end(self) -> "InsertEventRequest":
        if self.start >= self.end:
            raise ValueError("start must be before end")
        return self


# =============================================================================
# Response Models
# =============================================================================


class EnvelopeResponse(BaseModel):
    """Common response envelope."""

    statusCode: int = Field(..., description="HTTP status code")
    status: Literal["success", "fail"] = Field(..., description="Outcome")
    message: str = Field(..., description="Human-readable message")


class EventBody(BaseModel):
    """Stored event document."""

    creator: str = Field(..., description="User who created the event")
    start: str = Field(..., description="Start time (ISO 8601)")
    end: str = Field(..., description="End time (ISO 8601)")
    summary: str = Field(..., description="Event title")
    description: Optional[str] = Field(None, description="Event description")
    assignFor: str = Field(..., description="Member responsible for the event")
    eventId: str = Field(..., description="Google Calendar event ID")


class EventEntry(BaseModel):
    """Event with its ID."""

    id: str
    body: EventBody


class MemberEntry(BaseModel):
    """Family member, reduced to ID and role."""

    id: str
    role: str


class FamilyEventsData(BaseModel):
    """Family document with members and events."""

    id: str = Field(..., description="Family ID")
    body: dict[str, Any] = Field(..., description="Family document")
    members: list[MemberEntry] = Field(default_factory=list)
    events: list[EventEntry] = Field(default_factory=list)


class FamilyEventsResponse(EnvelopeResponse):
    """Response for listing a family's events."""

    data: FamilyEventsData


class EventCreatedResponse(EnvelopeResponse):
    """Response for a created event."""

    data: EventBody


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"] = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    calendar_ready: bool = Field(..., description="Calendar repository initialized")
