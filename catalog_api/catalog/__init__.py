"""Catalog module.

Provides catalog item storage, pagination-aware queries, semantic search
and mutations that emit price-change integration events.
"""

from catalog_api.catalog.models import CatalogBrand, CatalogItem, CatalogType
from catalog_api.catalog.repository import CatalogItemFilter, CatalogItemRepository
from catalog_api.catalog.service import (
    CatalogItemData,
    CatalogService,
    PaginatedItems,
    PaginationRequest,
)

__all__ = [
    # Models
    "CatalogBrand",
    "CatalogItem",
    "CatalogType",
    # Repository
    "CatalogItemFilter",
    "CatalogItemRepository",
    # Service
    "CatalogItemData",
    "CatalogService",
    "PaginatedItems",
    "PaginationRequest",
]
