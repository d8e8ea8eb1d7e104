# =============================================================================
# core/repositories/product_repository.py - Product Queries
# =============================================================================
# All reads and writes of the `products` table.
#
# Reads embed the category (id, name, color). Writes return the written row
# re-read with its category, so callers always see the same shape.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import Client

from core.models.product import PRODUCT_SELECT
from lib.supabase_client import PersistenceError, ViolationKind, gateway_failure

logger = logging.getLogger(__name__)

TABLE = "products"


class ProductRepository:
    """
    Query object for products.

    Args:
        client: The process-wide Supabase client

    Raises (every method):
        PersistenceError: On any database or transport failure
    """

    def __init__(self, client: Client):
        self._client = client

    def _table(self):
        return self._client.table(TABLE)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_products(
        self,
        offset: int,
        limit: int,
        category_id: str | None = None,
        search: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List products newest first.

        Args:
            offset: Rows to skip
            limit: Maximum rows to return
            category_id: Only products in this category
            search: Case-insensitive substring of name or barcode

        Returns:
            Tuple of (rows, total matching count)
        """
        query = self._table().select(PRODUCT_SELECT, count="exact")

        if category_id:
            query = query.eq("category_id", category_id)

        if search:
            query = query.or_(f"name.ilike.%{search}%,barcode.ilike.%{search}%")

        query = query.order("created_at", desc=True).range(offset, offset + limit - 1)

        try:
            response = query.execute()
        except Exception as e:
            raise gateway_failure(e) from e

        rows = response.data or []
        total = response.count or 0
        logger.debug(f"Listed {len(rows)} of {total} products (offset={offset}, limit={limit})")
        return rows, total

    def _fetch_one(self, column: str, value: str, columns: str) -> dict[str, Any] | None:
        try:
            response = (
                self._table()
                .select(columns)
                .eq(column, value)
                .single()
                .execute()
            )
        except Exception as e:
            failure = gateway_failure(e)
            if failure.kind == ViolationKind.NO_ROWS:
                return None
            raise failure from e

        return response.data or None

    def fetch_by_id(self, product_id: str, columns: str = PRODUCT_SELECT) -> dict[str, Any] | None:
        """
        Fetch one product by id.

        Returns:
            The row, or None if no product has this id
        """
        return self._fetch_one("id", product_id, columns)

    def fetch_by_barcode(self, barcode: str) -> dict[str, Any] | None:
        """
        Fetch one product by barcode.

        Returns:
            The row, or None if no product has this barcode
        """
        return self._fetch_one("barcode", barcode, PRODUCT_SELECT)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _reload(self, rows: list[dict[str, Any]] | None) -> dict[str, Any]:
        """Re-read a written row with its category embedded."""
        if not rows:
            raise PersistenceError(kind=ViolationKind.NO_ROWS, message="Write returned no rows")

        written = rows[0]
        product = self.fetch_by_id(str(written["id"]))
        if product is None:
            raise PersistenceError(
                kind=ViolationKind.NO_ROWS,
                message=f"Product {written['id']} vanished after write",
            )
        return product

    def insert(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert one product.

        Returns:
            The created row with generated id, created_at and category
        """
        try:
            response = self._table().insert(data).execute()
        except Exception as e:
            raise gateway_failure(e) from e

        return self._reload(response.data)

    def update(self, product_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Update the given columns of one product.

        Raises:
            PersistenceError: kind NO_ROWS if no product has this id
        """
        try:
            response = self._table().update(data).eq("id", product_id).execute()
        except Exception as e:
            raise gateway_failure(e) from e

        return self._reload(response.data)

    def delete(self, product_id: str) -> None:
        """
        Delete one product.

        Raises:
            PersistenceError: kind FOREIGN_KEY_VIOLATION if sales reference it
        """
        try:
            self._table().delete().eq("id", product_id).execute()
        except Exception as e:
            raise gateway_failure(e) from e
