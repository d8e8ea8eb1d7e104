# =============================================================================
# core/models/product.py - Product Schemas
# =============================================================================
# These models define the API contract for the product catalog:
# - UnitType: How a product is sold (kg, ons, pcs, liter)
# - ProductListResponse: Paginated list envelope
# - MessageResponse / ImageUploadResponse: Simple acknowledgements
#
# Mutation payloads are NOT parsed into models here: they are validated
# field by field by core/services/product_validator.py so that the first
# failing rule decides the error code.
# =============================================================================

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class UnitType(str, Enum):
    """
    Unit a product is priced in.

    Each unit has its own price column: price_kg, price_ons, price_pcs, price_liter.
    """
    KG = "kg"
    ONS = "ons"
    PCS = "pcs"
    LITER = "liter"

    @property
    def price_field(self) -> str:
        """Name of the price column for this unit (e.g. "price_kg")."""
        return price_field_for(self.value)


def price_field_for(unit_type: str) -> str:
    """Price column name for any unit type string."""
    return f"price_{unit_type}"


# numeric(10, 2) columns hold at most this value
MAX_NUMERIC_VALUE = Decimal("99999999.99")
MAX_NUMERIC_DISPLAY = "99,999,999.99"

PRICE_FIELDS: tuple[str, ...] = tuple(unit.price_field for unit in UnitType)

# Columns a client may write. Everything else in a payload is ignored.
WRITABLE_FIELDS: frozenset[str] = frozenset({
    "name",
    "category_id",
    "unit_type",
    *PRICE_FIELDS,
    "stock",
    "barcode",
    "image_url",
    "description",
})

# Embedded category selection used by every product read
PRODUCT_SELECT = """
    *,
    categories (
        id,
        name,
        color
    )
"""


class Pagination(BaseModel):
    """Pagination block of the list envelope. Field names follow the public API."""

    page: int = Field(..., ge=1, description="Current page number (1-indexed)")
    limit: int = Field(..., ge=1, description="Items per page")
    total: int = Field(default=0, ge=0, description="Total matching products")
    totalPages: int = Field(default=0, ge=0, description="Number of pages")


class ProductListResponse(BaseModel):
    """
    Paginated product list.

    Example:
        {
            "data": [...],
            "pagination": {"page": 1, "limit": 10, "total": 42, "totalPages": 5}
        }
    """
    data: list[dict[str, Any]] = Field(default_factory=list)
    pagination: Pagination


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str


class ImageUploadResponse(BaseModel):
    """Response of a successful image upload."""
    message: str = Field(default="Image uploaded successfully")
    imageUrl: str = Field(..., description="Public URL of the stored image")
