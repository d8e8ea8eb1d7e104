# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Tokens are HS256 JWTs signed with JWT_SECRET. A token is accepted only if
# it verifies AND its user id resolves to a row in the `users` table.
#
#   no bearer token               -> 401 "Access token required"
#   bad signature / malformed     -> 403 "Invalid token format"
#   expired                       -> 403 "Token expired"
#   no user id / unknown user     -> 403 "Invalid token"
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.post("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import ValidationError as PydanticValidationError

from app.config import settings
from app.auth.models import AuthUser, TokenPayload
from app.dependencies import get_user_repository
from app.exceptions import AuthError, MissingTokenError
from core.repositories import UserRepository
from lib.supabase_client import PersistenceError

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor. Missing tokens are reported by us (401),
# not by FastAPI, so every auth failure has the same body shape.
security = HTTPBearer(auto_error=False)


def decode_token(token: str) -> TokenPayload:
    """
    Verify a token's signature and expiry and return its claims.

    Raises:
        AuthError: 403 if the token is expired, malformed or badly signed
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise AuthError("Token expired", code="TOKEN_EXPIRED")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise AuthError("Invalid token format", code="INVALID_TOKEN_FORMAT")

    try:
        return TokenPayload(**payload)
    except PydanticValidationError as e:
        logger.warning(f"JWT claims have unexpected types: {e}")
        raise AuthError("Invalid token format", code="INVALID_TOKEN_FORMAT")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    users: UserRepository = Depends(get_user_repository),
) -> AuthUser:
    """
    Resolve the bearer token to an existing user.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies the JWT signature and expiry
    3. Looks up the user id from the token in the `users` table
    4. Returns an AuthUser

    Raises:
        MissingTokenError: 401 if no bearer token was sent
        AuthError: 403 if the token is rejected or the user doesn't exist
    """
    if credentials is None or not credentials.credentials:
        logger.info("No token provided")
        raise MissingTokenError()

    claims = decode_token(credentials.credentials)

    user_id = claims.user_id
    if not user_id:
        logger.warning("JWT token missing user id claim")
        raise AuthError("Invalid token")

    try:
        row = users.fetch_user(user_id)
    except PersistenceError as e:
        logger.error(f"Database error when checking user {user_id}: {e}")
        raise AuthError("Invalid token")

    if row is None:
        logger.warning(f"User not found in database: {user_id}")
        raise AuthError("Invalid token")

    user = AuthUser.from_row(row)
    logger.debug(f"Authenticated user: {user.username or user.id}")
    return user
