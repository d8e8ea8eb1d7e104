# =============================================================================
# core/services/product_validator.py - Product Payload Validation
# =============================================================================
# Decides whether a create/update payload may reach the database.
#
# Rules run in a fixed order and the FIRST failure is raised; errors are
# never aggregated. In update mode every rule only looks at fields present
# in the payload, and the unit-price rule never consults stored values.
#
# Usage:
#   from core.services.product_validator import validate_product_payload, ValidationMode
#   validate_product_payload(body, ValidationMode.CREATE)   # raises ValidationError
# =============================================================================

import logging
import math
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping

from app.exceptions import ValidationError, ValidationKind
from core.models.product import (
    MAX_NUMERIC_DISPLAY,
    MAX_NUMERIC_VALUE,
    PRICE_FIELDS,
    UnitType,
    price_field_for,
)

logger = logging.getLogger(__name__)

_UNIT_TYPES = {unit.value for unit in UnitType}


class ValidationMode(str, Enum):
    """
    - create: every required field must be present
    - update: partial payload, absent fields are skipped
    """
    CREATE = "create"
    UPDATE = "update"


# =============================================================================
# Helpers
# =============================================================================

def to_decimal(value: Any) -> Decimal | None:
    """
    Convert a JSON number (or numeric string) to Decimal.

    Goes through str() so 99999999.99 stays 99999999.99 instead of
    picking up binary float noise.

    Returns:
        Decimal, or None if the value is not a finite number
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = Decimal(str(value))
    elif isinstance(value, str) and value.strip():
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    return number if number.is_finite() else None


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _is_missing(value: Any) -> bool:
    """Any falsy value (None, False, 0, "", [], {}) or a whitespace-only string."""
    if not value or isinstance(value, bool):
        return True
    return isinstance(value, str) and not value.strip()


def _reject(kind: ValidationKind, message: str, field: str | None = None) -> ValidationError:
    logger.info(f"Validation failed: {message}")
    return ValidationError(kind, message, field=field)


# =============================================================================
# Individual Rules
# =============================================================================

def _check_unit_price(payload: Mapping[str, Any]) -> None:
    """
    The price column matching unit_type must be a number > 0.

    The column name is built from unit_type exactly as sent, so " kg "
    looks for "price_ kg " and fails here instead of at the database.
    """
    unit_type = str(payload["unit_type"])
    price_field = price_field_for(unit_type)
    price = to_decimal(payload.get(price_field))

    if price is None or price <= 0:
        raise _reject(
            ValidationKind.INVALID_UNIT_PRICE,
            f"Valid price for {unit_type} is required",
            field=price_field,
        )

    if unit_type not in _UNIT_TYPES:
        raise _reject(
            ValidationKind.INVALID_UNIT_TYPE,
            f"Unit type must be one of: {', '.join(sorted(_UNIT_TYPES))}",
            field="unit_type",
        )


def _check_numeric_bounds(payload: Mapping[str, Any]) -> None:
    """Every present price column and stock must fit numeric(10, 2)."""
    for field in PRICE_FIELDS:
        value = payload.get(field)
        if value is None:
            continue
        number = to_decimal(value)
        if number is None:
            raise _reject(
                ValidationKind.INVALID_NUMBER,
                f"{field.replace('price_', '').upper()} price must be a number",
                field=field,
            )
        if number > MAX_NUMERIC_VALUE:
            raise _reject(
                ValidationKind.PRICE_OVERFLOW,
                f"{field.replace('price_', '').upper()} price cannot exceed {MAX_NUMERIC_DISPLAY}",
                field=field,
            )

    stock = payload.get("stock")
    if stock is not None:
        number = to_decimal(stock)
        if number is None:
            raise _reject(ValidationKind.INVALID_NUMBER, "Stock must be a number", field="stock")
        if number > MAX_NUMERIC_VALUE:
            raise _reject(
                ValidationKind.STOCK_OVERFLOW,
                f"Stock cannot exceed {MAX_NUMERIC_DISPLAY}",
                field="stock",
            )


# =============================================================================
# Public API
# =============================================================================

def validate_create(payload: Mapping[str, Any]) -> None:
    """
    Validate a full product payload.

    Order: name, category_id, unit_type, unit price, price bounds, stock bound.

    Raises:
        ValidationError: for the first rule that fails
    """
    if _is_blank(payload.get("name")):
        raise _reject(ValidationKind.MISSING_NAME, "Product name is required", field="name")

    if _is_missing(payload.get("category_id")):
        raise _reject(ValidationKind.MISSING_CATEGORY, "Category is required", field="category_id")

    if _is_missing(payload.get("unit_type")):
        raise _reject(ValidationKind.MISSING_UNIT_TYPE, "Unit type is required", field="unit_type")

    _check_unit_price(payload)
    _check_numeric_bounds(payload)


def validate_update(payload: Mapping[str, Any]) -> None:
    """
    Validate a partial product payload.

    Only keys present in the payload are checked. If unit_type is present,
    its price column must be present in the SAME payload and be > 0.

    Raises:
        ValidationError: for the first rule that fails
    """
    if "name" in payload and _is_blank(payload["name"]):
        raise _reject(ValidationKind.MISSING_NAME, "Product name cannot be empty", field="name")

    if "category_id" in payload and _is_missing(payload["category_id"]):
        raise _reject(ValidationKind.MISSING_CATEGORY, "Category is required", field="category_id")

    if "unit_type" in payload:
        if _is_missing(payload["unit_type"]):
            raise _reject(ValidationKind.MISSING_UNIT_TYPE, "Unit type is required", field="unit_type")
        _check_unit_price(payload)

    _check_numeric_bounds(payload)


def validate_product_payload(payload: Mapping[str, Any], mode: ValidationMode) -> None:
    """
    Validate a product payload before any persistence call.

    Args:
        payload: Raw request body
        mode: ValidationMode.CREATE or ValidationMode.UPDATE

    Raises:
        ValidationError: The first violated rule (kind, message, field)
    """
    if mode == ValidationMode.CREATE:
        validate_create(payload)
    else:
        validate_update(payload)
