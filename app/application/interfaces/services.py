"""Service interfaces (ports) for external collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.identity import SignInResult


class IIdentityProvider(Protocol):
    """Protocol for the identity provider that issues and validates bearer credentials."""

    async def create_user(self, email: str, password: str) -> str:
        """Create a credential and return its provider-assigned uid."""

    async def delete_user(self, uid: str) -> None:
        """Delete the credential (no-op if missing)."""

    async def set_custom_claims(self, uid: str, claims: dict[str, Any]) -> None:
        """Replace the credential's custom claims."""

    async def verify_id_token(self, token: str) -> dict[str, Any]:
        """Validate token and return its decoded claims (includes 'sub').

        Raises InvalidTokenError on any failure.
        """

    async def sign_in(self, email: str, password: str) -> SignInResult:
        """Exchange email/password for an ID token. Raises InvalidCredentialsException."""

    async def aclose(self) -> None:
        """Release network resources."""
