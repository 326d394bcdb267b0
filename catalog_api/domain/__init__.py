"""Domain layer module.

Contains integration events and domain exceptions for the catalog.
"""

from catalog_api.domain.base import IntegrationEvent
from catalog_api.domain.events import ProductPriceChangedIntegrationEvent
from catalog_api.domain.exceptions import (
    CatalogError,
    CatalogItemNotFoundError,
    DomainError,
    InvalidCatalogItemIdError,
    InvalidPaginationError,
    PictureNotFoundError,
)

__all__ = [
    # Events
    "IntegrationEvent",
    "ProductPriceChangedIntegrationEvent",
    # Exceptions
    "CatalogError",
    "CatalogItemNotFoundError",
    "DomainError",
    "InvalidCatalogItemIdError",
    "InvalidPaginationError",
    "PictureNotFoundError",
]
