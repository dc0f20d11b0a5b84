"""Request correlation ID helpers.

The inbound ``x-request-id`` header is honoured when it carries a value;
blank or whitespace-only headers count as absent and a fresh UUID4 is issued.
The ID resolved for the current request is also bound in a context variable
so log records can pick it up without every caller passing it along.
"""
from __future__ import annotations
import uuid
from contextvars import ContextVar, Token
from typing import Optional

from starlette.requests import HTTPConnection
from starlette.responses import Response

REQUEST_ID_HEADER = "x-request-id"

_current_request_id: ContextVar[Optional[str]] = ContextVar("promptswap_request_id", default=None)


def get_request_id(request: HTTPConnection) -> str:
    header = request.headers.get(REQUEST_ID_HEADER)
    if header and header.strip():
        return header.strip()
    return str(uuid.uuid4())


def with_request_id_header(response: Response, request_id: str) -> Response:
    """Set ``x-request-id`` on ``response`` in place and return it for chaining."""
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def bind_request_id(request_id: str) -> Token:
    return _current_request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _current_request_id.reset(token)


def current_request_id() -> Optional[str]:
    """ID of the request being handled in this context, or ``None`` outside a request."""
    return _current_request_id.get()


__all__ = [
    "get_request_id",
    "with_request_id_header",
    "bind_request_id",
    "reset_request_id",
    "current_request_id",
    "REQUEST_ID_HEADER",
]
