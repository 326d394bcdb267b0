"""Domain exceptions.

Errors raised by the catalog services and rendered by the API layer
as structured error responses.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the API layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Catalog Errors
# ============================================================================


class CatalogError(DomainError):
    """Base class for catalog-related errors."""

    pass


class InvalidCatalogItemIdError(CatalogError):
    """Raised when a catalog item id is not a positive integer."""

    def __init__(self, item_id: int) -> None:
        """Initialize invalid id error.

        Args:
            item_id: The rejected id.
        """
        super().__init__("Id is not valid", details={"item_id": item_id})


class InvalidPaginationError(CatalogError):
    """Raised when pagination parameters are out of range."""

    def __init__(self, page_index: int, page_size: int, reason: str) -> None:
        """Initialize invalid pagination error.

        Args:
            page_index: Requested page index.
            page_size: Requested page size.
            reason: Explanation of why the parameters are invalid.
        """
        super().__init__(
            f"Invalid pagination (page_index={page_index}, page_size={page_size}): {reason}",
            details={"page_index": page_index, "page_size": page_size, "reason": reason},
        )


class CatalogItemNotFoundError(CatalogError):
    """Raised when a catalog item does not exist."""

    def __init__(self, item_id: int | None) -> None:
        """Initialize item not found error.

        Args:
            item_id: ID of the missing item.
        """
        super().__init__(
            f"Item with id {item_id} not found.",
            details={"item_id": item_id},
        )


class PictureNotFoundError(CatalogError):
    """Raised when a catalog item's picture file is missing."""

    def __init__(self, item_id: int, picture_file_name: str | None) -> None:
        """Initialize picture not found error.

        Args:
            item_id: ID of the catalog item.
            picture_file_name: Configured picture file name, if any.
        """
        super().__init__(
            f"Picture for item {item_id} not found.",
            details={"item_id": item_id, "picture_file_name": picture_file_name},
        )
