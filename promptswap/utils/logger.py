"""
Logging for the swap API.

Every record leaving a handler carries the ID of the request it was emitted
under. ``RequestContextFilter`` sets ``record.request_id`` from the context
variable bound by the request middleware, so plain ``logging`` users (uvicorn,
SQLAlchemy) get it too; ``StructuredLogger`` additionally puts it in the
record's structured fields alongside the keyword arguments of the call.
"""
import logging
import logging.config
import json
import sys
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from pathlib import Path
from .request_id import current_request_id

NAMESPACE = "promptswap"
# Loggers that get the service handlers instead of propagating to root.
MANAGED_LOGGERS = (NAMESPACE, "uvicorn", "sqlalchemy.engine")
NO_REQUEST = "-"

class RequestContextFilter(logging.Filter):
    """Stamp ``record.request_id``; never drops a record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = current_request_id() or NO_REQUEST
        return True

class JSONFormatter(logging.Formatter):
    """One JSON object per line, structured fields merged at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", None) or current_request_id(),
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(getattr(record, "extra_data", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)

class StructuredLogger:
    """
    Logger taking structured fields as keyword arguments.

    ``request_id`` defaults to the one bound for the current request; pass it
    explicitly only where code runs outside the request context.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log_with_extra(self, level: int, message: str, exc_info: bool = False, **fields: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return
        extra_data = {k: v for k, v in fields.items() if v is not None}
        extra_data.setdefault("request_id", current_request_id())
        if extra_data["request_id"] is None:
            del extra_data["request_id"]
        extra = {"extra_data": extra_data}
        if "request_id" in extra_data:
            extra["request_id"] = extra_data["request_id"]
        self.logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **fields: Any) -> None:
        self._log_with_extra(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self._log_with_extra(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._log_with_extra(logging.WARNING, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self._log_with_extra(logging.ERROR, message, **fields)

def _handler_config(log_level: str, log_file: Optional[str], enable_console: bool) -> Dict[str, Dict[str, Any]]:
    handlers: Dict[str, Dict[str, Any]] = {}
    if enable_console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "console",
            "filters": ["request_context"],
            "level": log_level,
        }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,  # 10MB
            "backupCount": 5,
            "formatter": "json",
            "filters": ["request_context"],
            "level": log_level,
        }
    return handlers

def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True
) -> None:
    """
    Configure console (plain text) and optional file (JSON) logging.

    Args:
        log_level: Level for the service loggers and handlers
        log_file: Optional path of a rotating JSON log file
        enable_console: Whether to log to stdout
    """
    handlers = _handler_config(log_level, log_file, enable_console)
    names = list(handlers)
    levels = {NAMESPACE: log_level, "uvicorn": "INFO", "sqlalchemy.engine": "WARNING"}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "request_context": {"()": RequestContextFilter},
        },
        "formatters": {
            "json": {"()": JSONFormatter},
            "console": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "loggers": {
            name: {"level": levels[name], "handlers": names, "propagate": False}
            for name in MANAGED_LOGGERS
        },
        "root": {"level": log_level, "handlers": names},
    })

def get_logger(name: str) -> StructuredLogger:
    """Structured logger under the ``promptswap`` namespace (``__name__`` is typical)."""
    if name == NAMESPACE or name.startswith(f"{NAMESPACE}."):
        return StructuredLogger(name)
    return StructuredLogger(f"{NAMESPACE}.{name}")

def log_business_event(event_type: str, details: Dict[str, Any], user_id: Optional[str] = None) -> None:
    """Audit trail entry, e.g. ``swap_action_requested``."""
    get_logger("audit").info(
        f"Business event: {event_type}",
        event_type=event_type,
        user_id=user_id,
        **details
    )

def log_performance(operation: str, duration_ms: float, **fields: Any) -> None:
    get_logger("performance").info(
        f"Performance: {operation}",
        operation=operation,
        duration_ms=round(duration_ms, 2),
        **fields
    )
