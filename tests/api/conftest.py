"""Shared fixtures for API tests."""

from collections.abc import AsyncGenerator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalog_api.infrastructure.catalog_ai import DisabledCatalogAI, get_catalog_ai
from catalog_api.infrastructure.database import get_session
from catalog_api.infrastructure.event_bus import InMemoryEventBus, get_event_bus
from catalog_api.main import app


@pytest.fixture
def api_catalog_ai() -> DisabledCatalogAI:
    """Catalog AI served to the API; disabled unless a test overrides it."""
    return DisabledCatalogAI()


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    api_catalog_ai,
    event_bus: InMemoryEventBus,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create an async test client bound to the in-memory database."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_catalog_ai] = lambda: api_catalog_ai
    app.dependency_overrides[get_event_bus] = lambda: event_bus

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
