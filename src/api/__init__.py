"""
Family Calendar API module.

Provides FastAPI HTTP endpoints for family events.
"""

from src.api.main import app, run_server

__all__ = ["app", "run_server"]
