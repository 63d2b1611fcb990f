"""Identity providers and their factory."""

from app.infrastructure.identity.factory import create_identity_provider
from app.infrastructure.identity.local_identity import LocalIdentityProvider

__all__ = ["LocalIdentityProvider", "create_identity_provider"]
