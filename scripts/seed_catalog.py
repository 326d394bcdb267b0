#!/usr/bin/env python3
"""Seed catalog script.

Creates the catalog tables and loads catalog items from a JSON file,
computing embeddings when an embedding endpoint is configured.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --file path/to/catalog.json
"""

import argparse
import asyncio
import sys
from pathlib import Path

from sqlalchemy import text

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog_api.catalog.seed import load_records, seed_catalog
from catalog_api.infrastructure import models  # noqa: F401  (registers event log table)
from catalog_api.infrastructure.catalog_ai import get_catalog_ai
from catalog_api.infrastructure.database import Base, async_session_factory, engine

DEFAULT_SEED_FILE = Path(__file__).parent / "catalog.json"


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        await conn.run_sync(Base.metadata.create_all)


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the product catalog",
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=DEFAULT_SEED_FILE,
        help=f"JSON seed file (default: {DEFAULT_SEED_FILE.name})",
    )

    args = parser.parse_args()

    print("=" * 60)
    print("Catalog Seeder")
    print("=" * 60)
    print(f"Seed file: {args.file}")
    print()

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    records = load_records(args.file)
    catalog_ai = get_catalog_ai()

    async with async_session_factory() as session:
        result = await seed_catalog(session, catalog_ai, records)

    print(f"  ✓ Brands: {result['brands_created']}")
    print(f"  ✓ Types: {result['types_created']}")
    print(f"  ✓ Items: {result['items_created']}")
    print(f"  ✓ Embeddings: {'yes' if catalog_ai.is_enabled else 'no (catalog AI disabled)'}")
    print()

    await engine.dispose()

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
