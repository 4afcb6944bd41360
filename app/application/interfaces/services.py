"""Service interfaces (ports) for the application layer.

Protocols define contracts for external services (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.user import IdentityAccount


class IIdentityProvider(Protocol):
    """Protocol for the identity provider's account administration API."""

    async def create_account(self, email: str, password: str) -> IdentityAccount:
        """Create a confirmed email/password account.

        Raises ConflictException when the email is already registered and
        DownstreamFailureException on any other provider error.
        """

    async def delete_account(self, account_id: str) -> bool:
        """Delete the account. Best-effort: errors are logged and False is returned, never raised."""

    async def get_account_by_id(self, account_id: str) -> IdentityAccount | None:
        """Return the account, or None when the provider does not know the id."""
