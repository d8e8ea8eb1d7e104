# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Authenticated user resolved from the `users` table.

    Built from the row the token's user id points to. Only the fields
    route handlers need are kept; credentials never leave the guard.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "AuthUser":
        return cls(
            id=str(row["id"]),
            username=row.get("username"),
            email=row.get("email"),
            role=row.get("role"),
            created_at=row.get("created_at"),
        )


class TokenPayload(BaseModel):
    """
    Decoded access token claims.

    Tokens are issued by the login service with a `userId` claim;
    `sub` is accepted as an alternative.
    """
    userId: Optional[Union[str, int]] = None
    sub: Optional[Union[str, int]] = None
    username: Optional[str] = None
    exp: Optional[int] = None
    iat: Optional[int] = None

    @property
    def user_id(self) -> Optional[str]:
        value = self.userId or self.sub
        return str(value) if value else None
