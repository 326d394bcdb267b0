"""API schemas for the Catalog API.

Pydantic models for request/response validation and serialization.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Brand / Type Schemas
# ============================================================================


class CatalogBrandSchema(BaseModel):
    """Catalog brand."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Brand identifier")
    brand: str = Field(..., description="Brand label")


class CatalogTypeSchema(BaseModel):
    """Catalog item type."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Type identifier")
    type: str = Field(..., description="Type label")


# ============================================================================
# Catalog Item Schemas
# ============================================================================


class CatalogItemResponse(BaseModel):
    """A catalog item."""

    id: int = Field(..., description="Item identifier")
    name: str = Field(..., description="Item name")
    description: str | None = Field(default=None, description="Item description")
    price: Decimal = Field(..., description="Unit price")
    picture_file_name: str | None = Field(default=None, description="Picture file name")
    catalog_type_id: int = Field(..., description="Type identifier")
    catalog_type: CatalogTypeSchema | None = Field(default=None, description="Item type")
    catalog_brand_id: int = Field(..., description="Brand identifier")
    catalog_brand: CatalogBrandSchema | None = Field(default=None, description="Item brand")
    available_stock: int = Field(..., description="Quantity in stock")
    restock_threshold: int = Field(..., description="Reorder below this stock level")
    max_stock_threshold: int = Field(..., description="Maximum units held in stock")


class CatalogItemRequest(BaseModel):
    """Request body to create or replace a catalog item."""

    id: int | None = Field(
        default=None, description="Item identifier (required when replacing)"
    )
    name: str = Field(..., min_length=1, max_length=50, description="Item name")
    description: str | None = Field(default=None, description="Item description")
    price: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2, description="Unit price")
    picture_file_name: str | None = Field(
        default=None, max_length=200, description="Picture file name"
    )
    catalog_type_id: int = Field(..., description="Type identifier")
    catalog_brand_id: int = Field(..., description="Brand identifier")
    available_stock: int = Field(default=0, ge=0, description="Quantity in stock")
    restock_threshold: int = Field(default=0, ge=0, description="Reorder below this stock level")
    max_stock_threshold: int = Field(
        default=0, ge=0, description="Maximum units held in stock"
    )

    @field_validator("picture_file_name")
    @classmethod
    def picture_file_name_is_plain(cls, value: str | None) -> str | None:
        """Picture names are bare file names inside the Pics folder."""
        if value is not None and ("/" in value or "\\" in value or value in (".", "..")):
            raise ValueError("picture_file_name must be a file name without a path")
        return value


class PaginatedItemsResponse(BaseModel):
    """One page of catalog items."""

    page_index: int = Field(..., description="Zero-based page index")
    page_size: int = Field(..., description="Items per page")
    count: int = Field(..., description="Total number of matching items")
    data: list[CatalogItemResponse] = Field(..., description="Items on this page")
