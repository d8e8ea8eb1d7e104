# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains the schemas and constants of the catalog:
# - product.py: Unit types, price bounds, list envelope
#
# These models define the "contract" between API and clients.
# =============================================================================

from .product import (
    MAX_NUMERIC_DISPLAY,
    MAX_NUMERIC_VALUE,
    PRICE_FIELDS,
    PRODUCT_SELECT,
    WRITABLE_FIELDS,
    ImageUploadResponse,
    MessageResponse,
    Pagination,
    ProductListResponse,
    UnitType,
    price_field_for,
)

__all__ = [
    "MAX_NUMERIC_DISPLAY",
    "MAX_NUMERIC_VALUE",
    "PRICE_FIELDS",
    "PRODUCT_SELECT",
    "WRITABLE_FIELDS",
    "ImageUploadResponse",
    "MessageResponse",
    "Pagination",
    "ProductListResponse",
    "UnitType",
    "price_field_for",
]
