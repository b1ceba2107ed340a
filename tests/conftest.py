"""
Shared fixtures. The environment is configured here, before any
application module is imported, so settings pick up the test values.
"""

import os
import tempfile

os.environ.setdefault("JWT_SECRET", "test-signing-secret-for-task-tracker")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="task-tracker-uploads-")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from auth.jwt import TokenService
from database.session import async_session_factory, close_db, init_db


class FakeClock:
    """Stand-in for ``time.time`` that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tokens(clock):
    return TokenService("unit-test-secret", expiry_seconds=86400, clock=clock)


@pytest_asyncio.fixture
async def session():
    # Disposing the engine drops the in-memory database, so each test starts empty.
    await init_db()
    async with async_session_factory() as db:
        yield db
    await close_db()


@pytest.fixture
def client():
    from main import app

    with TestClient(app) as test_client:
        yield test_client
