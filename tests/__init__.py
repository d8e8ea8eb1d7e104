# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Product Catalog API:
# - test_product_validator.py: Payload validation rules and their order
# - test_error_translator.py: Persistence error -> API error mapping
# - test_supabase_client.py: PostgREST error classification
# - test_product_service.py: Service orchestration against a fake repository
# - test_storage_service.py: Image validation and S3 upload/delete
# - test_auth.py: Bearer token guard
# - test_products_api.py / test_upload_api.py: HTTP surface
#
# Run tests with: pytest
# =============================================================================
