"""
Service account credentials for Google Calendar.

Family calendars are shared with the application's service account; there
is no per-user OAuth. The key comes either from a JSON file or from inline
JSON in the environment.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from google.oauth2 import service_account

from src.config import Settings
from src.integrations.google_calendar.exceptions import GoogleCalendarAuthError

logger = logging.getLogger(__name__)

CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
]


def get_service_account_credentials(
    service_account_file: Optional[str] = None,
    service_account_info: Optional[dict] = None,
) -> service_account.Credentials:
    """
    Load service account credentials. Inline info wins over a file.

    Raises:
        GoogleCalendarAuthError: Nothing configured, file missing, or the key
            could not be parsed
    """
    if not service_account_info and not service_account_file:
        raise GoogleCalendarAuthError(
            "Either service_account_file or service_account_info must be provided"
        )

    if not service_account_info and not Path(service_account_file).exists():
        raise GoogleCalendarAuthError(f"Service account file not found: {service_account_file}")

    try:
        if service_account_info:
            credentials = service_account.Credentials.from_service_account_info(
                service_account_info, scopes=CALENDAR_SCOPES
            )
        else:
            credentials = service_account.Credentials.from_service_account_file(
                service_account_file, scopes=CALENDAR_SCOPES
            )
    except Exception as e:
        raise GoogleCalendarAuthError(
            f"Failed to load service account credentials: {e}",
            original_error=e,
        )

    logger.info(f"Loaded service account credentials: {credentials.service_account_email}")
    return credentials


class GoogleAuthManager:
    """
    Holds the service account configuration and loads credentials lazily.

    The application starts without Google configured; the first calendar
    write then fails with GoogleCalendarAuthError.
    """

    def __init__(
        self,
        service_account_file: Optional[str] = None,
        service_account_info: Optional[dict] = None,
    ):
        self._service_account_file = service_account_file
        self._service_account_info = service_account_info
        self._credentials: Optional[service_account.Credentials] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleAuthManager":
        """
        Read GOOGLE_SERVICE_ACCOUNT_JSON and GOOGLE_SERVICE_ACCOUNT_FILE.

        Raises:
            GoogleCalendarAuthError: GOOGLE_SERVICE_ACCOUNT_JSON is not valid JSON
        """
        info = None
        if settings.google_service_account_json:
            try:
                info = json.loads(settings.google_service_account_json)
            except json.JSONDecodeError as e:
                raise GoogleCalendarAuthError(
                    f"Invalid JSON in GOOGLE_SERVICE_ACCOUNT_JSON: {e}",
                    original_error=e,
                )

        return cls(
            service_account_file=settings.google_service_account_file or None,
            service_account_info=info,
        )

    def get_credentials(self) -> service_account.Credentials:
        """
        Credentials, loaded on first call.

        Access tokens are refreshed by the API client's authorized transport.
        """
        if self._credentials is None:
            self._credentials = get_service_account_credentials(
                service_account_file=self._service_account_file,
                service_account_info=self._service_account_info,
            )
        return self._credentials

    @property
    def service_account_email(self) -> Optional[str]:
        """Address family calendars must be shared with."""
        return getattr(self.get_credentials(), "service_account_email", None)
