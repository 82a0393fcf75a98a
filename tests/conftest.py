"""
Shared fixtures: a temporary SQLite database and a small fixture catalog.
"""
import os
import tempfile

# Must be set before archcircuit.config is imported
_TEST_DB_DIR = tempfile.mkdtemp(prefix="archcircuit-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}"

import pytest
from httpx import ASGITransport, AsyncClient

from archcircuit.api.dependencies import get_catalog
from archcircuit.infrastructure.city_catalog import CityCatalog
from archcircuit.infrastructure.database import AsyncSessionLocal, init_models
from archcircuit.main import app

from tests.factories import fixture_cities


@pytest.fixture
def catalog() -> CityCatalog:
    return CityCatalog(fixture_cities())


@pytest.fixture
async def test_db():
    """Provide a database session for tests."""
    await init_models()
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client(catalog):
    """HTTP client against the app, using the fixture catalog."""
    await init_models()
    app.dependency_overrides[get_catalog] = lambda: catalog
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
