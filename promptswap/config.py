"""Core application configuration.

Settings are module constants read from the environment once at import time.
Tests that need different values monkeypatch the module attributes directly,
since anything imported before the patch keeps the original binding.
"""
from __future__ import annotations

import os

SERVICE_NAME: str = os.getenv("SERVICE_NAME", "promptswap-api")
SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")

# Default remains a lightweight local sqlite DB for development.
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+pysqlite:///./promptswap.db")

# ------------------------------- Logging ---------------------------------- #
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
# JSON file output is opt-in; console logging is always on.
LOG_FILE: str | None = os.getenv("LOG_FILE") or None

# --------------------------------- HTTP ----------------------------------- #
CORS_ORIGINS: list[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# ----------------------------- Swap actions ------------------------------- #
# Import path ("package.module:attribute") of the async callable that performs
# swap transitions. Left unset, swap action routes answer 503.
SWAP_ACTION_HANDLER: str | None = (os.getenv("SWAP_ACTION_HANDLER") or "").strip() or None

__all__ = [
	"SERVICE_NAME",
	"SERVICE_VERSION",
	"DATABASE_URL",
	"LOG_LEVEL",
	"LOG_FILE",
	"CORS_ORIGINS",
	"SWAP_ACTION_HANDLER",
]
