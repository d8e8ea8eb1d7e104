# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .error_translator import Operation, translate_persistence_error
from .product_service import ProductService
from .product_validator import ValidationMode, validate_product_payload
from .storage_service import ImageStorageService

__all__ = [
    "Operation",
    "translate_persistence_error",
    "ProductService",
    "ValidationMode",
    "validate_product_payload",
    "ImageStorageService",
]
