# =============================================================================
# app/routers/products.py - Product CRUD Endpoints
# =============================================================================
# Reads are public. Writes require a bearer token.
#
# Mutation bodies are taken as raw JSON objects: the product validator, not
# the request parser, decides which rule failed first.
# =============================================================================

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Path, Query, status

from app.auth import AuthUser, get_current_user
from app.config import settings
from app.dependencies import ProductServiceDep
from core.models.product import MessageResponse, ProductListResponse

router = APIRouter()


# =============================================================================
# Reads
# =============================================================================

@router.get("", response_model=ProductListResponse)
def list_products(
    service: ProductServiceDep,
    category_id: Annotated[str | None, Query(description="Only products in this category")] = None,
    search: Annotated[str | None, Query(description="Substring of name or barcode")] = None,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page")] = settings.DEFAULT_PAGE_SIZE,
):
    """
    List products with pagination, newest first.

    Each product includes its category (id, name, color).
    """
    return service.list_products(
        page=page,
        limit=limit,
        category_id=category_id,
        search=search,
    )


@router.get("/barcode/{barcode}")
def get_product_by_barcode(
    barcode: Annotated[str, Path(description="Product barcode")],
    service: ProductServiceDep,
) -> dict[str, Any]:
    """
    Look up a product by its barcode (used by the scanner on the POS screen).
    """
    return service.get_product_by_barcode(barcode)


@router.get("/{product_id}")
def get_product(
    product_id: Annotated[str, Path(description="Product ID")],
    service: ProductServiceDep,
) -> dict[str, Any]:
    """
    Get a single product with its category.
    """
    return service.get_product(product_id)


# =============================================================================
# Writes
# =============================================================================

@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    service: ProductServiceDep,
    payload: Annotated[dict[str, Any], Body(description="Product fields")],
    user: AuthUser = Depends(get_current_user),
) -> dict[str, Any]:
    """
    Create a product.

    Required: name, category_id, unit_type and a positive price for that unit
    (e.g. price_kg when unit_type is "kg"). Prices and stock max out at
    99,999,999.99.
    """
    return service.create_product(payload)


@router.put("/{product_id}")
def update_product(
    product_id: Annotated[str, Path(description="Product ID")],
    service: ProductServiceDep,
    payload: Annotated[dict[str, Any], Body(description="Fields to change")],
    user: AuthUser = Depends(get_current_user),
) -> dict[str, Any]:
    """
    Partially update a product.

    Only fields present in the body are validated and changed. Changing
    unit_type requires the matching price in the same request.
    """
    return service.update_product(product_id, payload)


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: Annotated[str, Path(description="Product ID")],
    service: ProductServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Delete a product.

    Fails with 409 PRODUCT_IN_USE if any sale references the product.
    """
    return service.delete_product(product_id)
