"""
Response builder utilities for framing service results as HTTP responses.

Every event endpoint answers with the same envelope:
{"statusCode": int, "status": "success" | "fail", "message": str, "data": ...}
"data" is omitted when the operation has no payload.
"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from src.services.event_service import ServiceResult


def build_envelope(
    status_code: int,
    message: str,
    data: Optional[Any] = None,
) -> dict[str, Any]:
    """Build the standard response envelope dictionary."""
    envelope: dict[str, Any] = {
        "statusCode": status_code,
        "status": "success" if status_code < 400 else "fail",
        "message": message,
    }
    if data is not None:
        envelope["data"] = jsonable_encoder(data)
    return envelope


def build_response(result: ServiceResult) -> JSONResponse:
    """
    Build a JSONResponse from an operation result.

    Args:
        result: Outcome of an event operation

    Returns:
        JSONResponse with the result's status code and envelope body
    """
    return JSONResponse(
        status_code=result.status_code,
        content=build_envelope(result.status_code, result.message, result.data),
    )


def build_error_response(
    status_code: int,
    message: str,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    """Build a failure envelope for exception handlers."""
    return JSONResponse(
        status_code=status_code,
        content=build_envelope(status_code, message),
        headers=headers,
    )
