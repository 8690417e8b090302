"""
FastAPI dependency injection providers.

Provides the calendar repository, a request-scoped family store and the
caller identity.
"""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import get_current_user_id
from src.config import Settings
from src.database import get_async_session
from src.integrations.base import CalendarRepository
from src.integrations.google_calendar import GoogleAuthManager, GoogleCalendarRepository
from src.services.family_store import FamilyStore, SQLAlchemyFamilyStore

logger = logging.getLogger(__name__)

__all__ = [
    "init_calendar_repository",
    "close_calendar_repository",
    "get_calendar_repository",
    "get_family_store",
    "get_current_user_id",
]


def init_calendar_repository(app: FastAPI, settings: Settings) -> CalendarRepository:
    """
    Create the process-wide Google Calendar repository at application startup.

    The repository lives on app.state for the lifetime of the application.
    """
    auth_manager = GoogleAuthManager.from_settings(settings)
    repository = GoogleCalendarRepository(auth_manager)
    app.state.calendar_repository = repository

    if not settings.has_google_credentials:
        logger.warning("No Google service account configured - calendar calls will fail")
    logger.info("Calendar repository initialized")
    return repository


def close_calendar_repository(app: FastAPI) -> None:
    """Release the calendar repository at application shutdown."""
    repository = getattr(app.state, "calendar_repository", None)
    if isinstance(repository, GoogleCalendarRepository):
        repository.close()
    app.state.calendar_repository = None


def get_calendar_repository(request: Request) -> CalendarRepository:
    """
    Dependency injection for the calendar repository.

    Raises:
        HTTPException: If the repository is not initialized
    """
    repository: Optional[CalendarRepository] = getattr(
        request.app.state, "calendar_repository", None
    )
    if repository is None:
        logger.error("Calendar repository not initialized")
        raise HTTPException(
            status_code=503,
            detail="Service temporarily unavailable - calendar not initialized",
        )
    return repository


def get_family_store(
    session: AsyncSession = Depends(get_async_session),
) -> FamilyStore:
    """Dependency injection for a request-scoped family store."""
    return SQLAlchemyFamilyStore(session)
