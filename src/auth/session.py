"""
Cookie session authentication.

Sessions are signed cookies managed by Starlette's SessionMiddleware. The
login flow that writes the session lives outside this service; endpoints
only read the authenticated user id from it.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from starlette.middleware.sessions import SessionMiddleware

from src.config import Settings

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


def install_session_middleware(app: FastAPI, settings: Settings) -> None:
    """Attach the signed-cookie session middleware to the app."""
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        session_cookie=settings.session_cookie_name,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.is_production,
    )


def get_current_user_id(request: Request) -> str:
    """
    FastAPI dependency returning the authenticated caller's user id.

    Raises:
        HTTPException: 401 if the request carries no authenticated session
    """
    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        logger.debug(f"Unauthenticated request to {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication.",
        )
    return user_id
