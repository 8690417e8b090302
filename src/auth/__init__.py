"""
Authentication module for Family Calendar.

Identifies the caller from a signed session cookie.
"""

from src.auth.session import (
    SESSION_USER_KEY,
    get_current_user_id,
    install_session_middleware,
)

__all__ = [
    "SESSION_USER_KEY",
    "get_current_user_id",
    "install_session_middleware",
]
