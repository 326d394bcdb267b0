"""Catalog repository for database operations.

Provides CRUD operations for catalog items with filtering, ordering
and pagination, plus lookups for brands and types.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import and_, func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.catalog.models import CatalogBrand, CatalogItem, CatalogType


@dataclass
class CatalogItemFilter:
    """Filter parameters for catalog item queries.

    Every field that is set adds one predicate; all predicates are
    combined with AND. ``None`` means match all.

    Attributes:
        name_prefix: Item name must start with this text.
        type_id: Filter by catalog type.
        brand_id: Filter by catalog brand.
    """

    name_prefix: str | None = None
    type_id: int | None = None
    brand_id: int | None = None

    def conditions(self) -> list[Any]:
        """Build the SQLAlchemy predicates for this filter.

        Returns:
            List of boolean clauses.
        """
        conditions = []

        if self.name_prefix is not None:
            conditions.append(CatalogItem.name.startswith(self.name_prefix, autoescape=True))

        if self.type_id is not None:
            conditions.append(CatalogItem.catalog_type_id == self.type_id)

        if self.brand_id is not None:
            conditions.append(CatalogItem.catalog_brand_id == self.brand_id)

        return conditions


class CatalogItemRepository:
    """Repository for CatalogItem database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = CatalogItemRepository(session)
            items = await repo.find_page(
                CatalogItemFilter(type_id=2),
                offset=0,
                limit=10,
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def add(self, item: CatalogItem) -> CatalogItem:
        """Add a new item and flush to obtain its id.

        Args:
            item: Item to add.

        Returns:
            Added item.
        """
        self.session.add(item)
        await self.session.flush()
        return item

    async def sync_id_sequence(self) -> None:
        """Move the PostgreSQL id sequence past the largest stored id.

        Needed after inserting items with explicit ids, which bypass the
        sequence. Other dialects assign ids from the table itself.
        """
        if self.session.bind.dialect.name != "postgresql":
            return
        await self.session.execute(
            text(
                "SELECT setval(pg_get_serial_sequence('catalog_items', 'id'), "
                "(SELECT MAX(id) FROM catalog_items))"
            )
        )

    async def delete(self, item: CatalogItem) -> None:
        """Delete an item.

        Args:
            item: Item to delete.
        """
        await self.session.delete(item)
        await self.session.flush()

    async def get_by_id(self, item_id: int) -> CatalogItem | None:
        """Get item by ID.

        Args:
            item_id: Item ID.

        Returns:
            CatalogItem if found, None otherwise.
        """
        result = await self.session.execute(
            select(CatalogItem).where(CatalogItem.id == item_id)
        )
        return result.scalar_one_or_none()

    async def get_by_ids(self, item_ids: Sequence[int]) -> Sequence[CatalogItem]:
        """Get all items whose id is in ``item_ids``.

        Args:
            item_ids: Item IDs.

        Returns:
            Matching items, ordered by id.
        """
        if not item_ids:
            return []
        result = await self.session.execute(
            select(CatalogItem)
            .where(CatalogItem.id.in_(item_ids))
            .order_by(CatalogItem.id)
        )
        return result.scalars().all()

    async def count(self, filters: CatalogItemFilter | None = None) -> int:
        """Count items matching filters.

        Args:
            filters: Filter parameters.

        Returns:
            Count of matching items.
        """
        query = select(func.count(CatalogItem.id))

        conditions = filters.conditions() if filters else []
        if conditions:
            query = query.where(and_(*conditions))

        result = await self.session.execute(query)
        return result.scalar_one()

    async def find_page(
        self,
        filters: CatalogItemFilter | None,
        offset: int,
        limit: int,
    ) -> Sequence[CatalogItem]:
        """Find one page of items ordered by name.

        Args:
            filters: Filter parameters.
            offset: Number of items to skip.
            limit: Maximum number of items to return.

        Returns:
            Sequence of matching items.
        """
        query = select(CatalogItem)

        conditions = filters.conditions() if filters else []
        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(CatalogItem.name.asc(), CatalogItem.id.asc())
        query = query.offset(offset).limit(limit)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def find_page_by_distance(
        self,
        vector: list[float],
        offset: int,
        limit: int,
    ) -> list[tuple[CatalogItem, float]]:
        """Find one page of items ordered by cosine distance to ``vector``.

        Args:
            vector: Query embedding.
            offset: Number of items to skip.
            limit: Maximum number of items to return.

        Returns:
            List of (item, distance) pairs, closest first.
        """
        distance = CatalogItem.embedding.cosine_distance(vector).label("distance")
        query = (
            select(CatalogItem, distance)
            .order_by(distance)
            .offset(offset)
            .limit(limit)
        )

        result = await self.session.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def list_brands(self) -> Sequence[CatalogBrand]:
        """List all brands ordered by label.

        Returns:
            Sequence of brands.
        """
        result = await self.session.execute(
            select(CatalogBrand).order_by(CatalogBrand.brand)
        )
        return result.scalars().all()

    async def list_types(self) -> Sequence[CatalogType]:
        """List all types ordered by label.

        Returns:
            Sequence of types.
        """
        result = await self.session.execute(
            select(CatalogType).order_by(CatalogType.type)
        )
        return result.scalars().all()
