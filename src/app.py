"""
ASGI entry point for Family Calendar API.

Re-exports the FastAPI app so it can be served with `uvicorn src.app:app`.
"""

from src.api.main import app

__all__ = ["app"]
