# =============================================================================
# core/repositories/user_repository.py - User Lookups
# =============================================================================

from __future__ import annotations

from typing import Any

from supabase import Client

from lib.supabase_client import ViolationKind, gateway_failure


class UserRepository:
    """Read access to the `users` table for the authentication guard."""

    def __init__(self, client: Client):
        self._client = client

    def fetch_user(self, user_id: str) -> dict[str, Any] | None:
        """
        Fetch a user by id.

        Returns:
            The user row, or None if no user has this id

        Raises:
            PersistenceError: On any other database failure
        """
        try:
            response = (
                self._client.table("users")
                .select("*")
                .eq("id", user_id)
                .single()
                .execute()
            )
        except Exception as e:
            failure = gateway_failure(e)
            if failure.kind == ViolationKind.NO_ROWS:
                return None
            raise failure from e

        return response.data or None
