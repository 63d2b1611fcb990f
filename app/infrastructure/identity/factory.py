"""Identity provider factory: Firebase Auth or local credentials from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.application.interfaces.services import IIdentityProvider
    from app.application.interfaces.stores import IDocumentStore
    from app.core.config import Settings


def create_identity_provider(
    settings: "Settings",
    documents: "IDocumentStore",
) -> "IIdentityProvider":
    """Create the configured identity provider ('firebase' or 'local').

    The local provider keeps its credentials in the given document store.
    """
    if settings.identity_backend == "local":
        from app.infrastructure.identity.local_identity import LocalIdentityProvider

        return LocalIdentityProvider(
            documents, token_ttl_minutes=settings.access_token_expire_minutes
        )
    if settings.identity_backend == "firebase":
        from app.infrastructure.firebase import create_firebase_identity_provider

        return create_firebase_identity_provider(settings)
    raise ValueError(f"Unknown identity backend: {settings.identity_backend}")
