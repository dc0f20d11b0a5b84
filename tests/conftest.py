import sys
from pathlib import Path
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.responses import JSONResponse

# Ensure project root on sys.path so 'promptswap' resolves without an editable install
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from promptswap.main import app  # type: ignore
from promptswap.api import deps  # type: ignore
from promptswap.api.deps import register_swap_action_handler  # type: ignore
"""Pytest fixtures.

Tests bypass the application lifespan (TestClient is not used as a context
manager), so no swap action handler is bound unless a test registers one.
"""

# In-memory sqlite shared across threads: TestClient runs the app in a worker thread.
engine = create_engine(
    "sqlite+pysqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Health checks and get_db look up SessionLocal on the module at call time.
import promptswap.database as _app_database  # noqa: E402
_app_database.SessionLocal = TestingSessionLocal  # type: ignore

@pytest.fixture()
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

def _override_get_db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

app.dependency_overrides[deps.get_db] = _override_get_db

@pytest.fixture(autouse=True)
def _reset_swap_handler():
    """Each test starts without a registered swap action handler."""
    if hasattr(app.state, "swap_action_handler"):
        del app.state.swap_action_handler
    yield
    if hasattr(app.state, "swap_action_handler"):
        del app.state.swap_action_handler

@pytest.fixture()
def client():
    return TestClient(app)

class RecordingSwapHandler:
    """Swap action handler double: records calls and returns a canned response."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.response_factory = lambda swap_id, action: JSONResponse(
            {"ok": True, "data": {"swapId": swap_id, "status": f"{action.value}ed"}}
        )

    async def __call__(self, request, swap_id, action):
        self.calls.append((request, swap_id, action))
        return self.response_factory(swap_id, action)

@pytest.fixture()
def swap_handler():
    handler = RecordingSwapHandler()
    register_swap_action_handler(app, handler)
    return handler
