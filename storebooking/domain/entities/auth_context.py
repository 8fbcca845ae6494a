from __future__ import annotations

from dataclasses import dataclass

from storebooking.domain.entities.user import UserRole


@dataclass(frozen=True)
class AuthorizationContext:
    """Who is acting, resolved once per request."""

    user_id: str
    role: UserRole
    owned_store_id: str | None = None

    def operates_store(self, store_id: str) -> bool:
        return self.role == UserRole.PROVIDER and self.owned_store_id == store_id
