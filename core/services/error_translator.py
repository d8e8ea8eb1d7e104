# =============================================================================
# core/services/error_translator.py - Persistence Error Translation
# =============================================================================
# Maps a structured PersistenceError from the gateway to exactly one API
# exception. Runs only after a persistence call has failed.
#
#   unique violation on barcode          -> 409 DUPLICATE_BARCODE
#   FK violation on category_id (writes) -> 400 INVALID_CATEGORY
#   numeric overflow                     -> 400 NUMERIC_OVERFLOW
#   FK violation on delete               -> 409 PRODUCT_IN_USE
#   no rows                              -> 404
#   anything else                        -> 500, vendor message in `details`
# =============================================================================

import logging
from enum import Enum

from app.exceptions import (
    CatalogException,
    ConflictError,
    NotFoundError,
    UpstreamError,
    ValidationError,
    ValidationKind,
)
from core.models.product import MAX_NUMERIC_DISPLAY
from lib.supabase_client import PersistenceError, ViolationKind, describe_error

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    """What the failed persistence call was doing."""
    LIST = "list"
    FETCH = "fetch"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


_FAILURE_MESSAGES: dict[Operation, str] = {
    Operation.LIST: "Failed to fetch products",
    Operation.FETCH: "Failed to fetch product",
    Operation.CREATE: "Failed to create product",
    Operation.UPDATE: "Failed to update product",
    Operation.DELETE: "Failed to delete product",
}

_WRITE_OPERATIONS = {Operation.CREATE, Operation.UPDATE}


def translate_persistence_error(error: PersistenceError, operation: Operation) -> CatalogException:
    """
    Translate a gateway failure into the API error taxonomy.

    Total: every input returns one exception; nothing is re-raised raw.

    Args:
        error: Structured failure from the persistence gateway
        operation: The operation that failed

    Returns:
        The CatalogException to raise
    """
    kind = error.kind

    if kind == ViolationKind.UNIQUE_VIOLATION and error.column == "barcode":
        return ConflictError("Product with this barcode already exists", code="DUPLICATE_BARCODE")

    if kind == ViolationKind.FOREIGN_KEY_VIOLATION:
        if operation == Operation.DELETE:
            return ConflictError(
                "Cannot delete product as it is referenced in sales records",
                code="PRODUCT_IN_USE",
            )
        if operation in _WRITE_OPERATIONS and error.column == "category_id":
            return ValidationError(
                ValidationKind.INVALID_CATEGORY,
                "Invalid category selected",
                field="category_id",
            )

    if kind == ViolationKind.NUMERIC_OVERFLOW:
        return ValidationError(
            ValidationKind.NUMERIC_OVERFLOW,
            f"One or more numeric values exceed the maximum allowed limit ({MAX_NUMERIC_DISPLAY})",
        )

    if kind == ViolationKind.NO_ROWS:
        return NotFoundError("Product not found")

    logger.error(f"Unhandled persistence error during {operation.value}: {describe_error(error)}")
    return UpstreamError(_FAILURE_MESSAGES[operation], details=error.message)
