from .base import ErrorDetail, SuccessResponse, ErrorResponse, success_response, error_response

__all__ = [
    "ErrorDetail",
    "SuccessResponse",
    "ErrorResponse",
    "success_response",
    "error_response",
]
