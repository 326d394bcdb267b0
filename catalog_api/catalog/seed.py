"""Catalog seeding from JSON records.

Each record has ``Name``, ``Description``, ``Price``, ``Type`` and
``Brand``, and optionally ``Id``. Brands and types are created on demand.
"""

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.catalog.models import CatalogBrand, CatalogItem, CatalogType
from catalog_api.catalog.repository import CatalogItemRepository
from catalog_api.infrastructure.catalog_ai import CatalogAI

logger = structlog.get_logger()

DEFAULT_AVAILABLE_STOCK = 100
DEFAULT_MAX_STOCK_THRESHOLD = 200
DEFAULT_RESTOCK_THRESHOLD = 10


def load_records(path: str | Path) -> list[dict[str, Any]]:
    """Load seed records from a JSON file.

    Args:
        path: Path to a JSON array of records.

    Returns:
        List of record dicts.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file does not contain a JSON array.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Seed file {path} must contain a JSON array")
    return data


async def seed_catalog(
    session: AsyncSession,
    catalog_ai: CatalogAI,
    records: list[dict[str, Any]],
) -> dict[str, int]:
    """Seed an empty catalog.

    Does nothing when the catalog already has items.

    Args:
        session: Async SQLAlchemy session.
        catalog_ai: Embedding provider; embeddings are computed in bulk when enabled.
        records: Seed records.

    Returns:
        Counts of created brands, types and items.
    """
    existing = (await session.execute(select(func.count(CatalogItem.id)))).scalar_one()
    if existing:
        logger.info("Catalog already seeded", items=existing)
        return {"brands_created": 0, "types_created": 0, "items_created": 0}

    brands = {b.brand: b for b in (await session.execute(select(CatalogBrand))).scalars()}
    types = {t.type: t for t in (await session.execute(select(CatalogType))).scalars()}
    brand_count, type_count = len(brands), len(types)

    for record in records:
        if record["Brand"] not in brands:
            brands[record["Brand"]] = CatalogBrand(brand=record["Brand"])
        if record["Type"] not in types:
            types[record["Type"]] = CatalogType(type=record["Type"])

    session.add_all(brands.values())
    session.add_all(types.values())
    await session.flush()

    items = []
    for record in records:
        item = CatalogItem(
            name=record["Name"],
            description=record.get("Description"),
            price=Decimal(str(record["Price"])),
            picture_file_name=record.get("PictureFileName") or (
                f"{record['Id']}.webp" if "Id" in record else None
            ),
            catalog_brand_id=brands[record["Brand"]].id,
            catalog_type_id=types[record["Type"]].id,
            available_stock=DEFAULT_AVAILABLE_STOCK,
            max_stock_threshold=DEFAULT_MAX_STOCK_THRESHOLD,
            restock_threshold=DEFAULT_RESTOCK_THRESHOLD,
        )
        if "Id" in record:
            item.id = record["Id"]
        items.append(item)

    if catalog_ai.is_enabled:
        embeddings = await catalog_ai.get_embeddings(items)
        for item, embedding in zip(items, embeddings or []):
            item.embedding = embedding

    session.add_all(items)
    await session.flush()
    if any("Id" in record for record in records):
        await CatalogItemRepository(session).sync_id_sequence()
    await session.commit()

    result = {
        "brands_created": len(brands) - brand_count,
        "types_created": len(types) - type_count,
        "items_created": len(items),
    }
    logger.info("Seeded catalog", **result)
    return result
