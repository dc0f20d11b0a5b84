"""Application error hierarchy.

Errors carry a category, a stable machine-readable code and an HTTP status.
The global exception handlers in ``promptswap.main`` render them into the
standard error envelope; nothing below the route layer builds responses.
"""
from __future__ import annotations

import enum
from typing import Any, Optional


class ErrorCategory(str, enum.Enum):
    VALIDATION = "VALIDATION"
    AUTH = "AUTH"
    BUSINESS = "BUSINESS"
    RESOURCE = "RESOURCE"
    EXTERNAL = "EXTERNAL"
    UNEXPECTED = "UNEXPECTED"


ERROR_STATUS_MAP: dict[ErrorCategory, int] = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.AUTH: 401,
    ErrorCategory.BUSINESS: 409,
    ErrorCategory.RESOURCE: 404,
    ErrorCategory.EXTERNAL: 502,
    ErrorCategory.UNEXPECTED: 500,
}


class ErrorCodes:
    # Validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_JSON = "INVALID_JSON"
    INVALID_ACTION = "INVALID_ACTION"

    # Authentication / authorization
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    AUTH_REQUIRED = "AUTH_REQUIRED"

    # Resources
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    SWAP_NOT_FOUND = "SWAP_NOT_FOUND"
    INVALID_STATUS = "INVALID_STATUS"

    # Server
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    SWAP_ACTIONS_UNAVAILABLE = "SWAP_ACTIONS_UNAVAILABLE"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"


# Fallback codes for plain HTTP exceptions raised by the framework or by
# route code using fastapi.HTTPException.
HTTP_STATUS_CODES: dict[int, str] = {
    400: ErrorCodes.INVALID_INPUT,
    401: ErrorCodes.UNAUTHORIZED,
    403: ErrorCodes.FORBIDDEN,
    404: ErrorCodes.NOT_FOUND,
    405: ErrorCodes.INVALID_INPUT,
    409: ErrorCodes.ALREADY_EXISTS,
    429: ErrorCodes.TOO_MANY_REQUESTS,
    503: ErrorCodes.SERVICE_UNAVAILABLE,
}


def code_for_status(status_code: int) -> str:
    if status_code in HTTP_STATUS_CODES:
        return HTTP_STATUS_CODES[status_code]
    return ErrorCodes.INTERNAL_ERROR if status_code >= 500 else ErrorCodes.INVALID_INPUT


class AppError(Exception):
    """Base class for expected, operational errors."""

    def __init__(
        self,
        category: ErrorCategory,
        code: str,
        message: str,
        details: Optional[Any] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.category = category
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code if status_code is not None else ERROR_STATUS_MAP[category]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, status_code={self.status_code}, message={self.message!r})"


class ValidationError(AppError):
    def __init__(self, code: str, message: str, details: Optional[Any] = None):
        super().__init__(ErrorCategory.VALIDATION, code, message, details)


class AuthError(AppError):
    def __init__(self, code: str, message: str, details: Optional[Any] = None, status_code: Optional[int] = None):
        super().__init__(ErrorCategory.AUTH, code, message, details, status_code)


class BusinessError(AppError):
    def __init__(self, code: str, message: str, details: Optional[Any] = None):
        super().__init__(ErrorCategory.BUSINESS, code, message, details)


class ResourceNotFoundError(AppError):
    def __init__(self, code: str, message: str, details: Optional[Any] = None):
        super().__init__(ErrorCategory.RESOURCE, code, message, details)


class ExternalServiceError(AppError):
    def __init__(self, code: str, message: str, details: Optional[Any] = None):
        super().__init__(ErrorCategory.EXTERNAL, code, message, details)


class ServiceUnavailableError(AppError):
    def __init__(self, code: str, message: str, details: Optional[Any] = None):
        super().__init__(ErrorCategory.UNEXPECTED, code, message, details, status_code=503)


class UnexpectedError(AppError):
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(ErrorCategory.UNEXPECTED, ErrorCodes.INTERNAL_ERROR, message, details)


__all__ = [
    "ErrorCategory",
    "ERROR_STATUS_MAP",
    "ErrorCodes",
    "code_for_status",
    "AppError",
    "ValidationError",
    "AuthError",
    "BusinessError",
    "ResourceNotFoundError",
    "ExternalServiceError",
    "ServiceUnavailableError",
    "UnexpectedError",
]
