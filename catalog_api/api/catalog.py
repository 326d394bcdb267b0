"""Catalog API endpoints.

Provides endpoints for querying, searching and modifying catalog items,
and for listing catalog brands and types.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.api.schemas import (
    CatalogBrandSchema,
    CatalogItemRequest,
    CatalogItemResponse,
    CatalogTypeSchema,
    ErrorResponse,
    PaginatedItemsResponse,
)
from catalog_api.catalog.models import CatalogItem
from catalog_api.catalog.service import (
    CatalogItemData,
    CatalogService,
    PaginatedItems,
    PaginationRequest,
)
from catalog_api.domain.exceptions import (
    CatalogItemNotFoundError,
    InvalidCatalogItemIdError,
    InvalidPaginationError,
    PictureNotFoundError,
)
from catalog_api.infrastructure.catalog_ai import CatalogAI, get_catalog_ai
from catalog_api.infrastructure.config import settings
from catalog_api.infrastructure.database import get_session
from catalog_api.infrastructure.event_bus import EventBus, get_event_bus

router = APIRouter(prefix="/api/catalog")


# ============================================================================
# Dependencies
# ============================================================================


def get_service(
    session: Annotated[AsyncSession, Depends(get_session)],
    catalog_ai: Annotated[CatalogAI, Depends(get_catalog_ai)],
    event_bus: Annotated[EventBus, Depends(get_event_bus)],
) -> CatalogService:
    """Get catalog service bound to the request's session."""
    return CatalogService(session, catalog_ai, event_bus)


def get_pagination(
    page_index: Annotated[int, Query(ge=0, description="Zero-based page index")] = 0,
    page_size: Annotated[
        int, Query(ge=1, le=settings.max_page_size, description="Items per page")
    ] = 10,
) -> PaginationRequest:
    """Build pagination parameters from the query string."""
    try:
        return PaginationRequest(page_index=page_index, page_size=page_size)
    except InvalidPaginationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error_code": "INVALID_PAGINATION", "message": e.message},
        ) from e


CatalogServiceDep = Annotated[CatalogService, Depends(get_service)]
PaginationDep = Annotated[PaginationRequest, Depends(get_pagination)]


# ============================================================================
# Converters
# ============================================================================


def item_to_response(item: CatalogItem) -> CatalogItemResponse:
    """Convert CatalogItem model to response schema."""
    return CatalogItemResponse(
        id=item.id,
        name=item.name,
        description=item.description,
        price=item.price,
        picture_file_name=item.picture_file_name,
        catalog_type_id=item.catalog_type_id,
        catalog_type=(
            CatalogTypeSchema.model_validate(item.catalog_type)
            if item.catalog_type
            else None
        ),
        catalog_brand_id=item.catalog_brand_id,
        catalog_brand=(
            CatalogBrandSchema.model_validate(item.catalog_brand)
            if item.catalog_brand
            else None
        ),
        available_stock=item.available_stock,
        restock_threshold=item.restock_threshold,
        max_stock_threshold=item.max_stock_threshold,
    )


def page_to_response(page: PaginatedItems[CatalogItem]) -> PaginatedItemsResponse:
    """Convert a page of items to response schema."""
    return PaginatedItemsResponse(
        page_index=page.page_index,
        page_size=page.page_size,
        count=page.count,
        data=[item_to_response(item) for item in page.data],
    )


def request_to_data(body: CatalogItemRequest) -> CatalogItemData:
    """Convert request body to service input."""
    return CatalogItemData(
        id=body.id,
        name=body.name,
        description=body.description,
        price=body.price,
        picture_file_name=body.picture_file_name,
        catalog_type_id=body.catalog_type_id,
        catalog_brand_id=body.catalog_brand_id,
        available_stock=body.available_stock,
        restock_threshold=body.restock_threshold,
        max_stock_threshold=body.max_stock_threshold,
    )


def item_not_found(e: CatalogItemNotFoundError) -> HTTPException:
    """Build the 404 response for a missing item."""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error_code": "ITEM_NOT_FOUND", "message": e.message},
    )


# ============================================================================
# Item Queries
# ============================================================================


@router.get(
    "/items",
    response_model=PaginatedItemsResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Items"],
    summary="List catalog items",
    description="Get a paginated list of items in the catalog.",
)
async def list_items(
    service: CatalogServiceDep,
    pagination: PaginationDep,
) -> PaginatedItemsResponse:
    """List catalog items ordered by name."""
    page = await service.list_items(pagination)
    return page_to_response(page)


@router.get(
    "/items/by",
    response_model=list[CatalogItemResponse],
    responses={400: {"model": ErrorResponse}},
    tags=["Items"],
    summary="Batch get catalog items",
    description="Get multiple items from the catalog.",
)
async def get_items_by_ids(
    service: CatalogServiceDep,
    ids: Annotated[
        list[int], Query(description="List of ids for catalog items to return")
    ],
) -> list[CatalogItemResponse]:
    """Get the catalog items with the given ids."""
    items = await service.get_items_by_ids(ids)
    return [item_to_response(item) for item in items]


@router.get(
    "/items/by/{name}",
    response_model=PaginatedItemsResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Items"],
    summary="Get catalog items by name",
    description="Get a paginated list of catalog items with the specified name.",
)
async def get_items_by_name(
    name: str,
    service: CatalogServiceDep,
    pagination: PaginationDep,
) -> PaginatedItemsResponse:
    """Get catalog items whose name starts with ``name``."""
    page = await service.get_items_by_name(name, pagination)
    return page_to_response(page)


@router.get(
    "/items/withsemanticrelevance/{text}",
    response_model=PaginatedItemsResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Search"],
    summary="Search catalog for relevant items",
    description="Search the catalog for items related to the specified text.",
)
async def get_items_by_semantic_relevance(
    text: str,
    service: CatalogServiceDep,
    pagination: PaginationDep,
) -> PaginatedItemsResponse:
    """Search items by semantic relevance.

    Falls back to a name-prefix search when no embedding service is
    configured.
    """
    page = await service.get_items_by_semantic_relevance(text, pagination)
    return page_to_response(page)


@router.get(
    "/items/type/all/brand",
    response_model=PaginatedItemsResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Brands"],
    summary="List catalog items",
    description="Get a list of catalog items of any brand.",
)
async def get_items_of_any_brand(
    service: CatalogServiceDep,
    pagination: PaginationDep,
) -> PaginatedItemsResponse:
    """List catalog items without a brand restriction."""
    page = await service.get_items_by_brand(None, pagination)
    return page_to_response(page)


@router.get(
    "/items/type/all/brand/{brand_id}",
    response_model=PaginatedItemsResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Brands"],
    summary="List catalog items by brand",
    description="Get a list of catalog items for the specified brand.",
)
async def get_items_by_brand(
    brand_id: int,
    service: CatalogServiceDep,
    pagination: PaginationDep,
) -> PaginatedItemsResponse:
    """List catalog items of one brand."""
    page = await service.get_items_by_brand(brand_id, pagination)
    return page_to_response(page)


@router.get(
    "/items/type/{type_id}/brand",
    response_model=PaginatedItemsResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Types"],
    summary="Get catalog items by type",
    description="Get catalog items of the specified type.",
)
async def get_items_by_type(
    type_id: int,
    service: CatalogServiceDep,
    pagination: PaginationDep,
) -> PaginatedItemsResponse:
    """List catalog items of one type, any brand."""
    page = await service.get_items_by_type_and_brand(type_id, None, pagination)
    return page_to_response(page)


@router.get(
    "/items/type/{type_id}/brand/{brand_id}",
    response_model=PaginatedItemsResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Types"],
    summary="Get catalog items by type and brand",
    description="Get catalog items of the specified type and brand.",
)
async def get_items_by_type_and_brand(
    type_id: int,
    brand_id: int,
    service: CatalogServiceDep,
    pagination: PaginationDep,
) -> PaginatedItemsResponse:
    """List catalog items of one type and brand."""
    page = await service.get_items_by_type_and_brand(type_id, brand_id, pagination)
    return page_to_response(page)


@router.get(
    "/items/{item_id}",
    response_model=CatalogItemResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    tags=["Items"],
    summary="Get catalog item",
    description="Get an item from the catalog.",
)
async def get_item(
    item_id: int,
    service: CatalogServiceDep,
) -> CatalogItemResponse:
    """Get a catalog item by ID.

    Args:
        item_id: Catalog item identifier.
        service: Catalog service.

    Returns:
        Item details including its brand.

    Raises:
        HTTPException: 400 if the id is not positive, 404 if not found.
    """
    try:
        item = await service.get_item(item_id)
    except InvalidCatalogItemIdError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error_code": "INVALID_ID", "message": e.message},
        ) from e
    except CatalogItemNotFoundError as e:
        raise item_not_found(e) from e

    return item_to_response(item)


@router.get(
    "/items/{item_id}/pic",
    responses={
        200: {
            "content": {
                "application/octet-stream": {},
                "image/png": {},
                "image/gif": {},
                "image/jpeg": {},
                "image/bmp": {},
                "image/tiff": {},
                "image/wmf": {},
                "image/jp2": {},
                "image/svg+xml": {},
                "image/webp": {},
            }
        },
        404: {"model": ErrorResponse},
    },
    response_class=FileResponse,
    tags=["Items"],
    summary="Get catalog item picture",
    description="Get the picture for a catalog item.",
)
async def get_item_picture(
    item_id: int,
    service: CatalogServiceDep,
) -> FileResponse:
    """Serve a catalog item's picture file."""
    try:
        picture = await service.get_item_picture(item_id, settings.pic_base_path)
    except CatalogItemNotFoundError as e:
        raise item_not_found(e) from e
    except PictureNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error_code": "PICTURE_NOT_FOUND", "message": e.message},
        ) from e

    return FileResponse(picture.path, media_type=picture.media_type)


# ============================================================================
# Brands and Types
# ============================================================================


@router.get(
    "/catalogtypes",
    response_model=list[CatalogTypeSchema],
    tags=["Types"],
    summary="List catalog item types",
    description="Get a list of the types of catalog items.",
)
async def list_types(service: CatalogServiceDep) -> list[CatalogTypeSchema]:
    """List catalog item types."""
    return [CatalogTypeSchema.model_validate(t) for t in await service.list_types()]


@router.get(
    "/catalogbrands",
    response_model=list[CatalogBrandSchema],
    tags=["Brands"],
    summary="List catalog item brands",
    description="Get a list of the brands of catalog items.",
)
async def list_brands(service: CatalogServiceDep) -> list[CatalogBrandSchema]:
    """List catalog item brands."""
    return [CatalogBrandSchema.model_validate(b) for b in await service.list_brands()]


# ============================================================================
# Item Mutations
# ============================================================================


@router.put(
    "/items",
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    tags=["Items"],
    summary="Create or replace a catalog item",
    description="Replace a catalog item; publishes a price-changed event when the price changes.",
)
async def update_item(
    body: CatalogItemRequest,
    service: CatalogServiceDep,
) -> Response:
    """Replace an existing catalog item.

    Args:
        body: New item values, including the item id.
        service: Catalog service.

    Returns:
        201 response pointing at the item.

    Raises:
        HTTPException: 404 if the item does not exist.
    """
    try:
        item = await service.update_item(request_to_data(body))
    except CatalogItemNotFoundError as e:
        raise item_not_found(e) from e

    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"/api/catalog/items/{item.id}"},
    )


@router.post(
    "/items",
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    tags=["Items"],
    summary="Create a catalog item",
    description="Create a new item in the catalog.",
)
async def create_item(
    body: CatalogItemRequest,
    service: CatalogServiceDep,
) -> Response:
    """Create a catalog item and return its location."""
    item = await service.create_item(request_to_data(body))

    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"/api/catalog/items/{item.id}"},
    )


@router.delete(
    "/items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    tags=["Items"],
    summary="Delete catalog item",
    description="Delete the specified catalog item.",
)
async def delete_item(
    item_id: int,
    service: CatalogServiceDep,
) -> Response:
    """Delete a catalog item."""
    try:
        await service.delete_item(item_id)
    except CatalogItemNotFoundError as e:
        raise item_not_found(e) from e

    return Response(status_code=status.HTTP_204_NO_CONTENT)
