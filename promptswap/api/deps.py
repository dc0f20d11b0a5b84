"""
Dependencies for database sessions, the generic table client and the swap action handler.
"""
import importlib
from typing import Awaitable, Callable, Generator
from fastapi import Depends, FastAPI, Request
from starlette.responses import Response
from sqlalchemy.orm import Session
from promptswap import database
from promptswap.database import GenericDatabaseClient, SessionDatabaseClient
from promptswap.errors import ErrorCodes, ServiceUnavailableError
from promptswap.models.enums import SwapAction
from promptswap.utils import get_logger

logger = get_logger(__name__)

# (request, swap_id, action) -> HTTP response. Authorization, allowed prior
# states and idempotence are the handler's business, not the route layer's.
SwapActionHandler = Callable[[Request, str, SwapAction], Awaitable[Response]]

def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.
    Ensures proper session lifecycle management with automatic cleanup.

    Yields:
        Session: SQLAlchemy database session
    """
    db = database.SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error("Database session error", error=str(e), exc_info=True)
        db.rollback()
        raise
    finally:
        db.close()

def get_generic_client(db: Session = Depends(get_db)) -> GenericDatabaseClient:
    """Request-scoped client for querying tables by name."""
    return SessionDatabaseClient(db)

def get_swap_action_handler(request: Request) -> SwapActionHandler:
    """
    Resolve the swap action handler registered on the application.

    Raises:
        ServiceUnavailableError: If no handler has been registered
    """
    handler = getattr(request.app.state, "swap_action_handler", None)
    if handler is None:
        logger.error(
            "Swap action requested but no handler is registered",
            path=request.url.path
        )
        raise ServiceUnavailableError(
            ErrorCodes.SWAP_ACTIONS_UNAVAILABLE,
            "Swap actions are not configured on this server"
        )
    return handler

def register_swap_action_handler(app: FastAPI, handler: SwapActionHandler) -> None:
    app.state.swap_action_handler = handler  # type: ignore[attr-defined]
    logger.info(
        "Swap action handler registered",
        handler=getattr(handler, "__qualname__", repr(handler))
    )

def load_swap_action_handler(path: str) -> SwapActionHandler:
    """
    Import a handler from a ``package.module:attribute`` path.

    Args:
        path: Import path of the handler callable

    Returns:
        The imported callable

    Raises:
        ValueError: If the path is malformed, its module cannot be imported,
            or the module has no such attribute
        TypeError: If the resolved attribute is not callable
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Swap action handler path must look like 'module:attribute', got {path!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import swap action handler module for {path!r}: {e}") from e
    try:
        handler = getattr(module, attr)
    except AttributeError as e:
        raise ValueError(f"Swap action handler {path!r} not found: {e}") from e
    if not callable(handler):
        raise TypeError(f"Swap action handler {path!r} is not callable")
    return handler
