"""
Pytest configuration and fixtures for the geo query service tests.
Provides an isolated session store and an in-process HTTP client.
"""

from pathlib import Path
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio  # type: ignore
from dotenv import load_dotenv

from services.geo_session_service import GeoSessionService, geo_session_service
from services.session_manager import SessionStore

# Try to load .env.test first, then fall back to regular .env
env_test_path = Path(__file__).parent / ".env.test"
if env_test_path.exists():
    load_dotenv(env_test_path, override=True)
else:
    load_dotenv(override=False)


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def service(store: SessionStore) -> GeoSessionService:
    return GeoSessionService(store=store)


@pytest.fixture
def app_store(monkeypatch) -> SessionStore:
    """Swap the app-wide session store for a fresh one per test."""
    fresh = SessionStore()
    monkeypatch.setattr(geo_session_service, "store", fresh)
    return fresh


@pytest_asyncio.fixture
async def client(app_store: SessionStore) -> AsyncGenerator[httpx.AsyncClient, None]:
    from main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
