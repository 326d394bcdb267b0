"""Catalog service for item queries and mutations.

High-level service that combines repository operations with
pagination, semantic search and price-change event emission.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Generic, TypeVar

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.application.integration_event_service import CatalogIntegrationEventService
from catalog_api.catalog.models import CatalogBrand, CatalogItem, CatalogType
from catalog_api.catalog.pictures import get_full_path, get_image_mime_type
from catalog_api.catalog.repository import CatalogItemFilter, CatalogItemRepository
from catalog_api.domain.events import ProductPriceChangedIntegrationEvent
from catalog_api.domain.exceptions import (
    CatalogItemNotFoundError,
    InvalidCatalogItemIdError,
    InvalidPaginationError,
    PictureNotFoundError,
)
from catalog_api.infrastructure.catalog_ai import CatalogAI
from catalog_api.infrastructure.event_bus import EventBus

T = TypeVar("T")

logger = structlog.get_logger()

# Largest offset the store accepts (32-bit signed)
MAX_OFFSET = 2**31 - 1


@dataclass(frozen=True)
class PaginationRequest:
    """Pagination parameters.

    Attributes:
        page_index: Zero-based page index.
        page_size: Items per page.
    """

    page_index: int = 0
    page_size: int = 10

    def __post_init__(self) -> None:
        if self.page_index < 0:
            raise InvalidPaginationError(
                self.page_index, self.page_size, "page_index must be >= 0"
            )
        if self.page_size <= 0:
            raise InvalidPaginationError(
                self.page_index, self.page_size, "page_size must be > 0"
            )
        if self.page_size * self.page_index > MAX_OFFSET:
            raise InvalidPaginationError(
                self.page_index, self.page_size, "page offset is too large"
            )

    @property
    def offset(self) -> int:
        """Calculate offset from page index."""
        return self.page_size * self.page_index

    @property
    def limit(self) -> int:
        """Get limit (alias for page_size)."""
        return self.page_size


@dataclass
class PaginatedItems(Generic[T]):
    """One page of a result set.

    Attributes:
        page_index: Zero-based page index.
        page_size: Items per page.
        count: Total number of items matching the query.
        data: Items on this page.
    """

    page_index: int
    page_size: int
    count: int
    data: list[T]


@dataclass
class CatalogItemData:
    """Incoming values for creating or replacing a catalog item."""

    name: str
    price: Decimal
    catalog_type_id: int
    catalog_brand_id: int
    id: int | None = None
    description: str | None = None
    picture_file_name: str | None = None
    available_stock: int = 0
    restock_threshold: int = 0
    max_stock_threshold: int = 0

    def apply_to(self, item: CatalogItem) -> None:
        """Copy these values onto an item (the id is left untouched)."""
        item.name = self.name
        item.description = self.description
        item.price = self.price
        item.picture_file_name = self.picture_file_name
        item.catalog_type_id = self.catalog_type_id
        item.catalog_brand_id = self.catalog_brand_id
        item.available_stock = self.available_stock
        item.restock_threshold = self.restock_threshold
        item.max_stock_threshold = self.max_stock_threshold


@dataclass
class ItemPicture:
    """Location and media type of an item picture."""

    path: Path
    media_type: str


class CatalogService:
    """Service for catalog operations.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(session, get_catalog_ai(), get_event_bus())
            page = await service.get_items_by_name("Alpine", PaginationRequest(0, 10))
    """

    def __init__(
        self,
        session: AsyncSession,
        catalog_ai: CatalogAI,
        event_bus: EventBus,
    ) -> None:
        """Initialize service with database session and collaborators.

        Args:
            session: Async SQLAlchemy session.
            catalog_ai: Embedding provider.
            event_bus: Bus for integration events.
        """
        self.session = session
        self.repository = CatalogItemRepository(session)
        self.catalog_ai = catalog_ai
        self.event_service = CatalogIntegrationEventService(session, event_bus)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def _paginate(
        self,
        filters: CatalogItemFilter | None,
        pagination: PaginationRequest,
    ) -> PaginatedItems[CatalogItem]:
        """Count and slice with the same filter."""
        total = await self.repository.count(filters)
        items = await self.repository.find_page(
            filters,
            offset=pagination.offset,
            limit=pagination.limit,
        )
        return PaginatedItems(
            page_index=pagination.page_index,
            page_size=pagination.page_size,
            count=total,
            data=list(items),
        )

    async def list_items(self, pagination: PaginationRequest) -> PaginatedItems[CatalogItem]:
        """List all items ordered by name.

        Args:
            pagination: Pagination parameters.

        Returns:
            Paginated items.
        """
        return await self._paginate(None, pagination)

    async def get_items_by_ids(self, item_ids: Sequence[int]) -> list[CatalogItem]:
        """Get the items with the given ids; unknown ids are skipped."""
        return list(await self.repository.get_by_ids(item_ids))

    async def get_item(self, item_id: int) -> CatalogItem:
        """Get a single item.

        Args:
            item_id: Item ID.

        Returns:
            The item.

        Raises:
            InvalidCatalogItemIdError: If ``item_id`` is not positive.
            CatalogItemNotFoundError: If the item does not exist.
        """
        if item_id <= 0:
            raise InvalidCatalogItemIdError(item_id)

        item = await self.repository.get_by_id(item_id)
        if item is None:
            raise CatalogItemNotFoundError(item_id)
        return item

    async def get_items_by_name(
        self,
        name: str,
        pagination: PaginationRequest,
    ) -> PaginatedItems[CatalogItem]:
        """Get items whose name starts with ``name``.

        Args:
            name: Name prefix.
            pagination: Pagination parameters.

        Returns:
            Paginated items.
        """
        return await self._paginate(CatalogItemFilter(name_prefix=name), pagination)

    async def get_items_by_semantic_relevance(
        self,
        text: str,
        pagination: PaginationRequest,
    ) -> PaginatedItems[CatalogItem]:
        """Get items ordered by semantic similarity to ``text``.

        Falls back to name-prefix search when the catalog AI is disabled.

        Args:
            text: Search text.
            pagination: Pagination parameters.

        Returns:
            Paginated items, most similar first.
        """
        if not self.catalog_ai.is_enabled:
            return await self.get_items_by_name(text, pagination)

        vector = await self.catalog_ai.get_embedding(text)

        total = await self.repository.count()
        rows = await self.repository.find_page_by_distance(
            vector,
            offset=pagination.offset,
            limit=pagination.limit,
        )

        logger.debug(
            "Semantic search results",
            text=text,
            results=", ".join(f"{item.name} => {distance}" for item, distance in rows),
        )

        return PaginatedItems(
            page_index=pagination.page_index,
            page_size=pagination.page_size,
            count=total,
            data=[item for item, _ in rows],
        )

    async def get_items_by_type_and_brand(
        self,
        type_id: int,
        brand_id: int | None,
        pagination: PaginationRequest,
    ) -> PaginatedItems[CatalogItem]:
        """Get items of a type, optionally restricted to a brand."""
        return await self._paginate(
            CatalogItemFilter(type_id=type_id, brand_id=brand_id),
            pagination,
        )

    async def get_items_by_brand(
        self,
        brand_id: int | None,
        pagination: PaginationRequest,
    ) -> PaginatedItems[CatalogItem]:
        """Get items of a brand, or all items when ``brand_id`` is None."""
        return await self._paginate(CatalogItemFilter(brand_id=brand_id), pagination)

    async def list_types(self) -> list[CatalogType]:
        """List catalog types ordered by label."""
        return list(await self.repository.list_types())

    async def list_brands(self) -> list[CatalogBrand]:
        """List catalog brands ordered by label."""
        return list(await self.repository.list_brands())

    async def get_item_picture(self, item_id: int, content_root: str | Path) -> ItemPicture:
        """Locate an item's picture file.

        Args:
            item_id: Item ID.
            content_root: Directory containing the ``Pics`` folder.

        Returns:
            Picture path and media type.

        Raises:
            CatalogItemNotFoundError: If the item does not exist.
            PictureNotFoundError: If the item has no picture file on disk.
        """
        item = await self.repository.get_by_id(item_id)
        if item is None:
            raise CatalogItemNotFoundError(item_id)

        if not item.picture_file_name:
            raise PictureNotFoundError(item_id, item.picture_file_name)

        path = get_full_path(content_root, item.picture_file_name)
        if path is None or not path.is_file():
            raise PictureNotFoundError(item_id, item.picture_file_name)

        return ItemPicture(path=path, media_type=get_image_mime_type(item.picture_file_name))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_item(self, data: CatalogItemData) -> CatalogItem:
        """Create a new item with its embedding.

        Args:
            data: Item values. ``data.id`` is used when set.

        Returns:
            The created item.
        """
        item = CatalogItem()
        if data.id:
            item.id = data.id
        data.apply_to(item)
        item.embedding = await self.catalog_ai.get_embedding_for_item(item)

        await self.repository.add(item)
        if data.id:
            await self.repository.sync_id_sequence()
        await self.session.commit()

        logger.info("Catalog item created", item_id=item.id, name=item.name)
        return item

    async def update_item(self, data: CatalogItemData) -> CatalogItem:
        """Replace an existing item's values.

        When the price changes, the item and a
        ``ProductPriceChangedIntegrationEvent`` are saved in one transaction
        and the event is then published.

        Args:
            data: New item values; ``data.id`` selects the item.

        Returns:
            The updated item.

        Raises:
            CatalogItemNotFoundError: If the item does not exist.
        """
        item = await self.repository.get_by_id(data.id) if data.id is not None else None
        if item is None:
            raise CatalogItemNotFoundError(data.id)

        old_price = item.price
        data.apply_to(item)
        item.embedding = await self.catalog_ai.get_embedding_for_item(item)

        if old_price != item.price:
            event = ProductPriceChangedIntegrationEvent(
                product_id=item.id,
                new_price=data.price,
                old_price=old_price,
            )

            logger.info(
                "Catalog item price changed",
                item_id=item.id,
                old_price=str(old_price),
                new_price=str(data.price),
            )

            await self.event_service.save_event_and_catalog_changes(event)
            await self.event_service.publish_through_event_bus(event)
        else:
            await self.session.commit()

        return item

    async def delete_item(self, item_id: int) -> None:
        """Delete an item.

        Args:
            item_id: Item ID.

        Raises:
            CatalogItemNotFoundError: If the item does not exist.
        """
        item = await self.repository.get_by_id(item_id)
        if item is None:
            raise CatalogItemNotFoundError(item_id)

        await self.repository.delete(item)
        await self.session.commit()

        logger.info("Catalog item deleted", item_id=item_id)
