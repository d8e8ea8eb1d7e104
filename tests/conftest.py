# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory fakes of the product and user repositories that fail the same
#   way the Supabase gateway does (structured PersistenceError)
# - A TestClient wired to the fakes through dependency overrides
# - Token factories
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-0123456789")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import copy
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.config import settings
from app.dependencies import get_image_storage, get_product_repository, get_user_repository
from app.main import app
from core.services.storage_service import ImageStorageService
from lib.supabase_client import PersistenceError, ViolationKind


# =============================================================================
# Fakes
# =============================================================================

CATEGORIES = {
    "c1": {"id": "c1", "name": "Grains", "color": "#f5c542"},
    "c2": {"id": "c2", "name": "Drinks", "color": "#3b82f6"},
}


class FakeProductRepository:
    """
    In-memory stand-in for ProductRepository.

    Enforces the same constraints as the real table:
    - category_id must exist (23503 on category_id)
    - barcode is unique (23505 on barcode)
    - products in `referenced_ids` are referenced by sales (23503 on delete)
    """

    def __init__(self):
        self.rows: dict[str, dict[str, Any]] = {}
        self.referenced_ids: set[str] = set()
        self.fail_with: PersistenceError | None = None
        self.calls: list[str] = []
        self._clock = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

    # -- helpers ---------------------------------------------------------------

    def _maybe_fail(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            error, self.fail_with = self.fail_with, None
            raise error

    def _joined(self, row: dict[str, Any]) -> dict[str, Any]:
        result = copy.deepcopy(row)
        category = CATEGORIES.get(row.get("category_id"))
        result["categories"] = copy.deepcopy(category) if category else None
        return result

    def _check_constraints(self, row: dict[str, Any], product_id: str | None = None) -> None:
        if row.get("category_id") not in CATEGORIES:
            raise PersistenceError(
                kind=ViolationKind.FOREIGN_KEY_VIOLATION,
                message='insert or update on table "products" violates foreign key constraint',
                column="category_id",
                table="categories",
                code="23503",
            )
        barcode = row.get("barcode")
        if barcode:
            for other_id, other in self.rows.items():
                if other_id != product_id and other.get("barcode") == barcode:
                    raise PersistenceError(
                        kind=ViolationKind.UNIQUE_VIOLATION,
                        message='duplicate key value violates unique constraint "products_barcode_key"',
                        column="barcode",
                        code="23505",
                    )

    def add(self, **fields: Any) -> dict[str, Any]:
        """Seed a product directly."""
        return self.insert(fields)

    # -- repository interface --------------------------------------------------

    def list_products(self, offset, limit, category_id=None, search=None):
        self._maybe_fail("list_products")
        rows = list(self.rows.values())
        if category_id:
            rows = [r for r in rows if r.get("category_id") == category_id]
        if search:
            needle = search.lower()
            rows = [
                r for r in rows
                if needle in (r.get("name") or "").lower() or needle in (r.get("barcode") or "").lower()
            ]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return [self._joined(r) for r in rows[offset:offset + limit]], len(rows)

    def fetch_by_id(self, product_id, columns=None):
        self._maybe_fail("fetch_by_id")
        row = self.rows.get(product_id)
        if row is None:
            return None
        if columns == "id, image_url":
            return {"id": row["id"], "image_url": row.get("image_url")}
        return self._joined(row)

    def fetch_by_barcode(self, barcode):
        self._maybe_fail("fetch_by_barcode")
        for row in self.rows.values():
            if row.get("barcode") == barcode:
                return self._joined(row)
        return None

    def insert(self, data):
        self._maybe_fail("insert")
        self._check_constraints(data)
        self._clock += timedelta(minutes=1)
        row = {
            **copy.deepcopy(data),
            "id": str(uuid.uuid4()),
            "created_at": self._clock.isoformat(),
        }
        self.rows[row["id"]] = row
        return self._joined(row)

    def update(self, product_id, data):
        self._maybe_fail("update")
        if product_id not in self.rows:
            raise PersistenceError(kind=ViolationKind.NO_ROWS, message="Write returned no rows")
        merged = {**self.rows[product_id], **copy.deepcopy(data)}
        self._check_constraints(merged, product_id=product_id)
        self.rows[product_id] = merged
        return self._joined(merged)

    def delete(self, product_id):
        self._maybe_fail("delete")
        if product_id in self.referenced_ids:
            raise PersistenceError(
                kind=ViolationKind.FOREIGN_KEY_VIOLATION,
                message='update or delete on table "products" violates foreign key constraint',
                column="id",
                table="sales",
                code="23503",
            )
        self.rows.pop(product_id, None)


class FakeUserRepository:
    """In-memory stand-in for UserRepository."""

    def __init__(self, users: dict[str, dict[str, Any]] | None = None):
        self.users = users or {}
        self.fail_with: PersistenceError | None = None

    def fetch_user(self, user_id):
        if self.fail_with is not None:
            raise self.fail_with
        return self.users.get(user_id)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def product_repo():
    """Empty in-memory product repository."""
    return FakeProductRepository()


@pytest.fixture
def user_repo():
    """User repository with one admin user (id "u1")."""
    return FakeUserRepository({
        "u1": {"id": "u1", "username": "admin", "role": "admin", "email": "admin@example.com"},
    })


@pytest.fixture
def s3_client():
    """Mocked boto3 S3 client."""
    return MagicMock()


@pytest.fixture
def image_storage(s3_client):
    """Image storage wired to the mocked S3 client."""
    return ImageStorageService(
        client=s3_client,
        bucket="test-bucket",
        public_url="https://cdn.example.com",
        max_size_bytes=5 * 1024 * 1024,
    )


@pytest.fixture
def client(product_repo, user_repo, image_storage):
    """TestClient with repositories and storage replaced by fakes."""
    app.dependency_overrides[get_product_repository] = lambda: product_repo
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(
    user_id: str | None = "u1",
    expires_in: timedelta = timedelta(hours=1),
    secret: str | None = None,
    **claims: Any,
) -> str:
    """Sign an access token the way the login service does."""
    payload: dict[str, Any] = {"exp": datetime.now(timezone.utc) + expires_in, **claims}
    if user_id is not None:
        payload["userId"] = user_id
    return jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def auth_headers():
    """Authorization header for user u1."""
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def rice_payload():
    """A valid create payload."""
    return {
        "name": "Rice",
        "category_id": "c1",
        "unit_type": "kg",
        "price_kg": 15.50,
    }
