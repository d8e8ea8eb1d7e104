# =============================================================================
# core/services/product_service.py - Product Business Logic
# =============================================================================
# Handles product CRUD: validation first, then one or two gateway calls,
# then error translation. Separates HTTP concerns from database logic.
# =============================================================================

import logging
import math
import re
from typing import Any

from app.exceptions import NotFoundError
from core.models.product import WRITABLE_FIELDS, Pagination, ProductListResponse
from core.repositories.product_repository import ProductRepository
from core.services.error_translator import Operation, translate_persistence_error
from core.services.product_validator import ValidationMode, validate_product_payload
from core.services.storage_service import ImageStorageService
from lib.supabase_client import PersistenceError, describe_error

logger = logging.getLogger(__name__)

# Characters with meaning inside a PostgREST or=(...) filter
_SEARCH_UNSAFE = re.compile(r"[,()]")


class ProductService:
    """
    Service for product management operations.

    Provides a clean interface between API routes and the persistence gateway.

    Args:
        repository: Product query object
        storage: Image storage, used to clean up images of deleted products
    """

    def __init__(self, repository: ProductRepository, storage: ImageStorageService | None = None):
        self.repository = repository
        self.storage = storage

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _writable(payload: dict[str, Any]) -> dict[str, Any]:
        """Keep only columns a client may write."""
        ignored = sorted(key for key in payload if key not in WRITABLE_FIELDS)
        if ignored:
            logger.debug(f"Ignoring non-writable product fields: {ignored}")
        return {key: value for key, value in payload.items() if key in WRITABLE_FIELDS}

    @staticmethod
    def _fail(error: PersistenceError, operation: Operation) -> Exception:
        logger.warning(f"Persistence error during {operation.value}: {describe_error(error)}")
        return translate_persistence_error(error, operation)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_products(
        self,
        page: int = 1,
        limit: int = 10,
        category_id: str | None = None,
        search: str | None = None,
    ) -> dict[str, Any]:
        """
        List products with pagination, newest first.

        Args:
            page: Page number (1-indexed)
            limit: Items per page
            category_id: Optional category filter
            search: Optional name/barcode substring

        Returns:
            {"data": [...], "pagination": {"page", "limit", "total", "totalPages"}}
        """
        if search:
            search = _SEARCH_UNSAFE.sub("", search).strip() or None

        offset = (page - 1) * limit
        try:
            rows, total = self.repository.list_products(
                offset=offset,
                limit=limit,
                category_id=category_id,
                search=search,
            )
        except PersistenceError as e:
            raise self._fail(e, Operation.LIST) from e

        envelope = ProductListResponse(
            data=rows,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                totalPages=math.ceil(total / limit),
            ),
        )
        return envelope.model_dump()

    def get_product(self, product_id: str) -> dict[str, Any]:
        """
        Get one product with its category.

        Raises:
            NotFoundError: If no product has this id
        """
        try:
            product = self.repository.fetch_by_id(product_id)
        except PersistenceError as e:
            raise self._fail(e, Operation.FETCH) from e

        if product is None:
            raise NotFoundError("Product not found", resource_id=product_id)
        return product

    def get_product_by_barcode(self, barcode: str) -> dict[str, Any]:
        """
        Get one product by barcode.

        Raises:
            NotFoundError: If no product has this barcode
        """
        try:
            product = self.repository.fetch_by_barcode(barcode)
        except PersistenceError as e:
            raise self._fail(e, Operation.FETCH) from e

        if product is None:
            raise NotFoundError("Product not found", resource_id=barcode)
        return product

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create_product(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Validate and insert a product.

        Returns:
            The created row with its category

        Raises:
            ValidationError: First failed rule (nothing is written)
            ConflictError: Duplicate barcode
            UpstreamError: Any unexpected database failure
        """
        validate_product_payload(payload, ValidationMode.CREATE)

        try:
            product = self.repository.insert(self._writable(payload))
        except PersistenceError as e:
            raise self._fail(e, Operation.CREATE) from e

        logger.info(f"Created product: {product.get('id')}")
        return product

    def update_product(self, product_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Validate and apply a partial update.

        Only fields present in the payload are validated and written.

        Raises:
            ValidationError: First failed rule (nothing is written)
            NotFoundError: If no product has this id
            ConflictError: Duplicate barcode
        """
        validate_product_payload(payload, ValidationMode.UPDATE)

        changes = self._writable(payload)
        if not changes:
            return self.get_product(product_id)

        try:
            product = self.repository.update(product_id, changes)
        except PersistenceError as e:
            raise self._fail(e, Operation.UPDATE) from e

        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return product

    def delete_product(self, product_id: str) -> dict[str, str]:
        """
        Delete a product that no sale references.

        The existence check and the delete are separate calls; the database's
        foreign key is what actually protects referenced products.

        Raises:
            NotFoundError: If no product has this id
            ConflictError: PRODUCT_IN_USE if sales reference it
        """
        try:
            existing = self.repository.fetch_by_id(product_id, columns="id, image_url")
        except PersistenceError as e:
            raise self._fail(e, Operation.DELETE) from e

        if existing is None:
            raise NotFoundError("Product not found", resource_id=product_id)

        try:
            self.repository.delete(product_id)
        except PersistenceError as e:
            raise self._fail(e, Operation.DELETE) from e

        logger.info(f"Deleted product: {product_id}")

        image_url = existing.get("image_url")
        if image_url and self.storage is not None:
            if not self.storage.delete_image(image_url):
                logger.warning(f"Image of deleted product {product_id} was not removed: {image_url}")

        return {"message": "Product deleted successfully"}
