"""
Utilities package initialization.
"""
from .logger import get_logger, log_business_event, log_performance, setup_logging
from .request_id import (
    REQUEST_ID_HEADER,
    bind_request_id,
    current_request_id,
    get_request_id,
    reset_request_id,
    with_request_id_header,
)

__all__ = [
    "get_logger",
    "log_business_event",
    "log_performance",
    "setup_logging",
    "REQUEST_ID_HEADER",
    "bind_request_id",
    "current_request_id",
    "get_request_id",
    "reset_request_id",
    "with_request_id_header",
]
