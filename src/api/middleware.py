"""
FastAPI middleware for request logging.

Tags each request with a short ID and logs its outcome and duration.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# Context variable for request ID (available across async calls)
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def get_request_id() -> str:
    """Get current request ID from context."""
    return request_id_ctx.get()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with its status code and elapsed time.

    Reuses an incoming X-Request-ID header when the caller supplies one,
    otherwise generates a short ID. The ID is echoed in the response headers.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        req_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        token = request_id_ctx.set(req_id)
        started = time.perf_counter()

        logger.info(
            f"[{req_id}] {request.method} {request.url.path}",
            extra={"request_id": req_id, "method": request.method, "path": request.url.path},
        )

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(
                f"[{req_id}] Request failed after {elapsed_ms:.0f}ms: {e}",
                extra={"request_id": req_id, "elapsed_ms": elapsed_ms},
                exc_info=True,
            )
            raise
        finally:
            request_id_ctx.reset(token)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"[{req_id}] {response.status_code} in {elapsed_ms:.0f}ms",
            extra={
                "request_id": req_id,
                "status_code": response.status_code,
                "elapsed_ms": elapsed_ms,
            },
        )

        response.headers[REQUEST_ID_HEADER] = req_id
        return response
