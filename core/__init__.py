# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the catalog's business logic:
# - models/: Pydantic schemas and product constants
# - repositories/: Supabase queries (the persistence gateway)
# - services/: Validation, error translation, product and image services
#
# Code in this package never touches Request or Response objects.
# This keeps the logic testable and reusable.
# =============================================================================
