"""Shared fixtures: in-memory database, fake catalog AI and event bus."""

from collections.abc import AsyncGenerator, Sequence
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from catalog_api.catalog.models import CatalogBrand, CatalogItem, CatalogType
from catalog_api.domain.base import IntegrationEvent
from catalog_api.infrastructure import models  # noqa: F401
from catalog_api.infrastructure.catalog_ai import item_embedding_text
from catalog_api.infrastructure.config import settings
from catalog_api.infrastructure.database import Base
from catalog_api.infrastructure.event_bus import EventBusError, InMemoryEventBus


# ============================================================================
# Collaborator Fakes
# ============================================================================


class FakeCatalogAI:
    """Deterministic embedding provider that records the texts it embeds."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.texts: list[str] = []

    @property
    def is_enabled(self) -> bool:
        return self.enabled

    def _vector(self, text: str) -> list[float]:
        vector = [0.0] * settings.embedding_dimensions
        vector[0] = float(len(text))
        vector[1] = 1.0
        return vector

    async def get_embedding(self, text: str) -> list[float] | None:
        self.texts.append(text)
        return self._vector(text)

    async def get_embedding_for_item(self, item: CatalogItem) -> list[float] | None:
        return await self.get_embedding(item_embedding_text(item))

    async def get_embeddings(self, items: Sequence[CatalogItem]) -> list[list[float]] | None:
        return [await self.get_embedding_for_item(item) for item in items]


class FailingEventBus:
    """Event bus that rejects every event."""

    def __init__(self) -> None:
        self.attempts: list[IntegrationEvent] = []

    async def publish(self, event: IntegrationEvent) -> None:
        self.attempts.append(event)
        raise EventBusError(str(event.event_id), "Event bus unavailable", 503)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite engine with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Database session for a single test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    """In-memory event bus."""
    return InMemoryEventBus()


@pytest.fixture
def catalog_ai() -> FakeCatalogAI:
    """Enabled fake catalog AI."""
    return FakeCatalogAI()


@pytest.fixture
def failing_event_bus() -> FailingEventBus:
    """Event bus that rejects every event."""
    return FailingEventBus()


# ============================================================================
# Sample Data Fixtures
# ============================================================================


async def add_item(
    session: AsyncSession,
    name: str,
    price: str = "10.00",
    brand: CatalogBrand | None = None,
    catalog_type: CatalogType | None = None,
    **kwargs,
) -> CatalogItem:
    """Insert a catalog item and commit."""
    item = CatalogItem(
        name=name,
        price=Decimal(price),
        catalog_brand_id=brand.id if brand else 1,
        catalog_type_id=catalog_type.id if catalog_type else 1,
        **kwargs,
    )
    session.add(item)
    await session.commit()
    return item


@pytest.fixture
async def lookups(session: AsyncSession) -> dict[str, CatalogBrand | CatalogType]:
    """Create two brands and two types."""
    daybird = CatalogBrand(brand="Daybird")
    zephyr = CatalogBrand(brand="Zephyr")
    footwear = CatalogType(type="Footwear")
    jackets = CatalogType(type="Jackets")
    session.add_all([daybird, zephyr, footwear, jackets])
    await session.commit()
    return {
        "daybird": daybird,
        "zephyr": zephyr,
        "footwear": footwear,
        "jackets": jackets,
    }


@pytest.fixture
async def sample_items(
    session: AsyncSession,
    lookups: dict[str, CatalogBrand | CatalogType],
) -> list[CatalogItem]:
    """Create four items across two brands and two types."""
    return [
        await add_item(
            session,
            "Wanderer Boots",
            "109.99",
            lookups["daybird"],
            lookups["footwear"],
            description="Waterproof hiking boots",
            picture_file_name="1.webp",
        ),
        await add_item(session, "Wanderer Jacket", "129.99", lookups["daybird"], lookups["jackets"]),
        await add_item(session, "Alpine Boots", "89.99", lookups["zephyr"], lookups["footwear"]),
        await add_item(session, "Stormbreaker Jacket", "99.99", lookups["zephyr"], lookups["jackets"]),
    ]


@pytest.fixture
async def many_items(
    session: AsyncSession,
    lookups: dict[str, CatalogBrand | CatalogType],
) -> list[CatalogItem]:
    """Create 23 items named Item 00 .. Item 22."""
    items = [
        CatalogItem(
            name=f"Item {i:02d}",
            price=Decimal("1.00"),
            catalog_brand_id=lookups["daybird"].id,
            catalog_type_id=lookups["footwear"].id,
        )
        for i in range(23)
    ]
    session.add_all(items)
    await session.commit()
    return items
