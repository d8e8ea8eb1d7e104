# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Tokens are issued by the login service, not by this API.
# These routes let a client check a stored token and read its user.
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser

router = APIRouter()


@router.get("/me", response_model=AuthUser)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> AuthUser:
    """
    Get the current authenticated user's profile.

    Raises:
        401: If no token is sent
        403: If the token is invalid or expired
    """
    return user


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.
    """
    return {
        "valid": True,
        "user_id": user.id,
        "username": user.username,
    }
