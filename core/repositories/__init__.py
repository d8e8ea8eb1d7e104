# =============================================================================
# core/repositories/ - Persistence Gateway
# =============================================================================
# Thin query objects over the Supabase client. Every failure leaves this
# package as a structured PersistenceError (see lib/supabase_client.py).
# =============================================================================

from .product_repository import ProductRepository
from .user_repository import UserRepository

__all__ = [
    "ProductRepository",
    "UserRepository",
]
