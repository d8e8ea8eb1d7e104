# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - products.py: Product catalog CRUD endpoints
# - upload.py: Product image upload endpoint
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import products
from . import upload

__all__ = [
    "health",
    "products",
    "upload",
]
