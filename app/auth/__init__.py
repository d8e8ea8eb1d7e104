# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT bearer-token authentication backed by the `users` table.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.post("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import decode_token, get_current_user
from app.auth.models import AuthUser, TokenPayload

__all__ = [
    "decode_token",
    "get_current_user",
    "AuthUser",
    "TokenPayload",
]
