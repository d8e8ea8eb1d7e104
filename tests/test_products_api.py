# =============================================================================
# tests/test_products_api.py - Product Endpoint Tests
# =============================================================================
# This module contains tests for:
# - Public reads (list, by id, by barcode)
# - Authenticated writes (create, update, delete)
# - Error response shape for every failure class
#
# Repositories are in-memory fakes (see conftest.py).
# =============================================================================

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from app.dependencies import get_optional_supabase_client, get_s3_client
from app.main import app
from lib.supabase_client import PersistenceError, ViolationKind


# =============================================================================
# Reads
# =============================================================================

class TestReadProducts:
    """Test GET endpoints (no auth required)."""

    def test_list_empty(self, client):
        response = client.get("/api/products")

        assert response.status_code == 200
        assert response.json() == {
            "data": [],
            "pagination": {"page": 1, "limit": 10, "total": 0, "totalPages": 0},
        }

    def test_list_pagination_params(self, client, product_repo):
        for i in range(12):
            product_repo.add(name=f"Item {i}", category_id="c1", unit_type="pcs", price_pcs=100)

        response = client.get("/api/products", params={"page": 2, "limit": 5})

        body = response.json()
        assert len(body["data"]) == 5
        assert body["pagination"] == {"page": 2, "limit": 5, "total": 12, "totalPages": 3}

    def test_list_search(self, client, product_repo, rice_payload):
        product_repo.add(**rice_payload)
        product_repo.add(name="Milk", category_id="c2", unit_type="liter", price_liter=18000)

        response = client.get("/api/products", params={"search": "mil"})

        assert [p["name"] for p in response.json()["data"]] == ["Milk"]

    def test_list_rejects_bad_page(self, client):
        response = client.get("/api/products", params={"page": 0})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REQUEST"

    def test_list_rejects_oversized_limit(self, client):
        response = client.get("/api/products", params={"limit": 1000})
        assert response.status_code == 400

    def test_get_by_id(self, client, product_repo, rice_payload):
        created = product_repo.add(**rice_payload)

        response = client.get(f"/api/products/{created['id']}")

        assert response.status_code == 200
        assert response.json()["categories"]["name"] == "Grains"

    def test_get_is_repeatable(self, client, product_repo, rice_payload):
        created = product_repo.add(**rice_payload)

        first = client.get(f"/api/products/{created['id']}").json()
        second = client.get(f"/api/products/{created['id']}").json()

        assert first == second

    def test_get_missing(self, client):
        response = client.get("/api/products/missing-id")

        assert response.status_code == 404
        assert response.json() == {"error": "Product not found", "code": "NOT_FOUND"}

    def test_get_by_barcode(self, client, product_repo, rice_payload):
        product_repo.add(**rice_payload, barcode="8991234567890")

        response = client.get("/api/products/barcode/8991234567890")

        assert response.status_code == 200
        assert response.json()["name"] == "Rice"

    def test_get_by_unknown_barcode(self, client):
        assert client.get("/api/products/barcode/000").status_code == 404

    def test_database_failure(self, client, product_repo):
        product_repo.fail_with = PersistenceError(kind=ViolationKind.OTHER, message="relation does not exist")

        response = client.get("/api/products")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to fetch products",
            "code": "UPSTREAM_ERROR",
            "details": "relation does not exist",
        }


# =============================================================================
# Create
# =============================================================================

class TestCreateProduct:
    """Test POST /api/products."""

    def test_requires_token(self, client, rice_payload, product_repo):
        response = client.post("/api/products", json=rice_payload)

        assert response.status_code == 401
        assert product_repo.rows == {}

    def test_create(self, client, auth_headers, rice_payload):
        response = client.post("/api/products", json=rice_payload, headers=auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Rice"
        assert data["id"]
        assert data["categories"] == {"id": "c1", "name": "Grains", "color": "#f5c542"}

    def test_created_product_is_readable(self, client, auth_headers, rice_payload):
        created = client.post("/api/products", json=rice_payload, headers=auth_headers).json()

        response = client.get(f"/api/products/{created['id']}")

        assert response.json()["id"] == created["id"]

    def test_first_validation_error_only(self, client, auth_headers):
        response = client.post("/api/products", json={}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Product name is required", "code": "MISSING_NAME"}

    def test_wrong_unit_price(self, client, auth_headers):
        payload = {"name": "Soap", "category_id": "c1", "unit_type": "pcs", "price_kg": 5}

        response = client.post("/api/products", json=payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Valid price for pcs is required"

    def test_price_overflow(self, client, auth_headers, rice_payload):
        response = client.post(
            "/api/products",
            json={**rice_payload, "price_kg": 100000000},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "KG price cannot exceed 99,999,999.99"

    def test_duplicate_barcode(self, client, auth_headers, rice_payload):
        client.post("/api/products", json={**rice_payload, "barcode": "123"}, headers=auth_headers)

        response = client.post(
            "/api/products",
            json={**rice_payload, "name": "Brown Rice", "barcode": "123"},
            headers=auth_headers,
        )

        assert response.status_code == 409
        assert response.json() == {
            "error": "Product with this barcode already exists",
            "code": "DUPLICATE_BARCODE",
        }

    def test_invalid_category(self, client, auth_headers, rice_payload):
        response = client.post(
            "/api/products",
            json={**rice_payload, "category_id": "does-not-exist"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid category selected", "code": "INVALID_CATEGORY"}

    def test_database_numeric_overflow(self, client, auth_headers, rice_payload, product_repo):
        product_repo.fail_with = PersistenceError(
            kind=ViolationKind.NUMERIC_OVERFLOW, message="numeric field overflow", code="22003"
        )

        response = client.post("/api/products", json=rice_payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "NUMERIC_OVERFLOW"

    def test_non_object_body(self, client, auth_headers):
        response = client.post("/api/products", json=["Rice"], headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REQUEST"


# =============================================================================
# Update
# =============================================================================

class TestUpdateProduct:
    """Test PUT /api/products/{id}."""

    def test_requires_token(self, client, product_repo, rice_payload):
        created = product_repo.add(**rice_payload)

        response = client.put(f"/api/products/{created['id']}", json={"stock": 1})

        assert response.status_code == 401

    def test_partial_update(self, client, auth_headers, product_repo, rice_payload):
        created = product_repo.add(**rice_payload)

        response = client.put(
            f"/api/products/{created['id']}",
            json={"stock": 42, "description": "Premium"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["stock"] == 42
        assert data["description"] == "Premium"
        assert data["name"] == "Rice"

    def test_empty_name(self, client, auth_headers, product_repo, rice_payload):
        created = product_repo.add(**rice_payload)

        response = client.put(f"/api/products/{created['id']}", json={"name": ""}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Product name cannot be empty"

    def test_unit_type_change_requires_price(self, client, auth_headers, product_repo, rice_payload):
        created = product_repo.add(**rice_payload, price_pcs=500)

        response = client.put(
            f"/api/products/{created['id']}",
            json={"unit_type": "pcs"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_UNIT_PRICE"

    def test_update_missing(self, client, auth_headers):
        response = client.put("/api/products/missing", json={"stock": 1}, headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Product not found"


# =============================================================================
# Delete
# =============================================================================

class TestDeleteProduct:
    """Test DELETE /api/products/{id}."""

    def test_requires_token(self, client, product_repo, rice_payload):
        created = product_repo.add(**rice_payload)

        assert client.delete(f"/api/products/{created['id']}").status_code == 401
        assert created["id"] in product_repo.rows

    def test_delete(self, client, auth_headers, product_repo, rice_payload):
        created = product_repo.add(**rice_payload)

        response = client.delete(f"/api/products/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted successfully"}
        assert client.get(f"/api/products/{created['id']}").status_code == 404

    def test_delete_missing(self, client, auth_headers):
        response = client.delete("/api/products/missing", headers=auth_headers)
        assert response.status_code == 404

    def test_delete_referenced(self, client, auth_headers, product_repo, rice_payload):
        created = product_repo.add(**rice_payload)
        product_repo.referenced_ids.add(created["id"])

        response = client.delete(f"/api/products/{created['id']}", headers=auth_headers)

        assert response.status_code == 409
        assert response.json() == {
            "error": "Cannot delete product as it is referenced in sales records",
            "code": "PRODUCT_IN_USE",
        }


# =============================================================================
# Misc
# =============================================================================

class TestMisc:
    """Test root, health and unexpected failures."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["health"] == "/api/health"

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_liveness(self, client):
        assert client.get("/api/health/live").json()["status"] == "alive"

    def test_readiness_without_database(self, client):
        """No lifespan ran, so the database client was never created."""
        response = client.get("/api/health/ready")

        body = response.json()
        assert body["status"] == "degraded"
        assert body["checks"]["database"].startswith("unhealthy")
        assert body["checks"]["storage"] == "not configured"

    def test_readiness_with_injected_clients(self, client):
        db_client = MagicMock()
        s3_client = MagicMock()
        app.dependency_overrides[get_optional_supabase_client] = lambda: db_client
        app.dependency_overrides[get_s3_client] = lambda: s3_client

        body = client.get("/api/health/ready").json()

        assert body["status"] == "ready"
        assert body["checks"] == {"database": "healthy", "storage": "healthy"}
        db_client.table.assert_called_once_with("products")
        s3_client.head_bucket.assert_called_once()

    def test_readiness_database_error(self, client):
        db_client = MagicMock()
        db_client.table.return_value.select.return_value.limit.return_value.execute.side_effect = (
            ConnectionError("connection refused")
        )
        app.dependency_overrides[get_optional_supabase_client] = lambda: db_client

        body = client.get("/api/health/ready").json()

        assert body["status"] == "degraded"
        assert body["checks"]["database"] == "unhealthy: connection refused"

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert "error" in response.json()

    def test_unexpected_error_is_500(self, product_repo):
        from app.dependencies import get_product_repository

        class BrokenRepository:
            def list_products(self, **kwargs):
                raise RuntimeError("boom")

        app.dependency_overrides[get_product_repository] = lambda: BrokenRepository()
        try:
            response = TestClient(app, raise_server_exceptions=False).get("/api/products")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"error": "An unexpected error occurred", "code": "INTERNAL_ERROR"}
