"""
Subsystem failures raised by the store and calendar collaborators.

Each event operation catches these once and maps them to a 500 result whose
message prefix names the failing subsystem.
"""


class FamilyCalendarError(Exception):
    """Base exception for collaborator failures."""

    prefix: str = ""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    @property
    def public_message(self) -> str:
        """Message with the subsystem prefix, as returned to clients."""
        return f"{self.prefix}{self.message}"


class StoreError(FamilyCalendarError):
    """A read or write against the family document store failed."""

    prefix = "Database Error: "


class CalendarError(FamilyCalendarError):
    """A call to the external calendar service failed."""

    prefix = "Google Calendar Error: "
