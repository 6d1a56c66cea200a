"""
DB Time Service: Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures (function-scoped):
    ├── test_settings: Settings pointing at an address nothing listens on
    ├── fake_db: Mock DatabaseClient returning one row with a `now` column
    ├── app: FastAPI app with get_database overridden to return fake_db
    ├── test_client: HTTPX AsyncClient bound to `app`
    └── closed_port: A local TCP port with no listener
"""

import os
import socket
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Reduce noise during tests; must be set before dbtime.config is imported
os.environ["LOG_LEVEL"] = "WARNING"

from dbtime.config import Settings  # noqa: E402
from dbtime.database import DatabaseClient, get_database  # noqa: E402
from dbtime.main import create_app  # noqa: E402


SAMPLE_NOW = datetime(2026, 10, 19, 16, 47, 3, 512345, tzinfo=timezone.utc)


def _free_port() -> int:
    """Ask the OS for an unused port, then release it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def closed_port():
    return _free_port()


@pytest.fixture
def test_settings(closed_port):
    """
    Settings for an app whose real database is unreachable.

    Tests that need a working database override get_database instead.
    """
    return Settings(
        _env_file=None,
        db_host="127.0.0.1",
        db_port=closed_port,
        db_pool_pre_ping=False,
        server_host="127.0.0.1",
        log_level="WARNING",
    )


@pytest.fixture
def sample_now():
    return SAMPLE_NOW


@pytest.fixture
def fake_db():
    """
    Mock DatabaseClient.

    Usage:
        fake_db.execute.side_effect = DatabaseError("...")
    """
    db = MagicMock(spec=DatabaseClient)
    db.execute = AsyncMock(return_value=[{"now": SAMPLE_NOW}])
    db.dispose = AsyncMock()
    return db


@pytest.fixture
def app(test_settings, fake_db):
    application = create_app(test_settings)
    application.dependency_overrides[get_database] = lambda: fake_db
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await app.state.db.dispose()
