"""
Response envelope schemas used across the application.
"""
from typing import Optional, Any
from pydantic import BaseModel, Field

class ErrorDetail(BaseModel):
    code: str = Field(description="Stable machine-readable error code")
    message: str
    details: Optional[Any] = None

class SuccessResponse(BaseModel):
    """Envelope for successful responses: ``{"ok": true, "data": ...}``."""
    ok: bool = True
    data: Any = None
    message: Optional[str] = None

class ErrorResponse(BaseModel):
    """Envelope for failures. ``request_id`` ties the body to the ``x-request-id`` header."""
    ok: bool = False
    error: ErrorDetail
    request_id: Optional[str] = None

def success_response(data: Any, message: Optional[str] = None) -> dict:
    return SuccessResponse(data=data, message=message).model_dump(exclude_none=True)

def error_response(
    code: str,
    message: str,
    details: Optional[Any] = None,
    request_id: Optional[str] = None,
) -> dict:
    envelope = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details),
        request_id=request_id,
    )
    return envelope.model_dump(mode="json")
