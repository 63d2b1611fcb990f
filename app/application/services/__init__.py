"""Application services: identity verification and account registration."""

from app.application.services.identity_verifier import (
    IdentityVerifier,
    extract_bearer_token,
)
from app.application.services.registration_service import (
    RegistrationService,
    admin_namespace,
)
from app.application.services.saga import Saga

__all__ = [
    "IdentityVerifier",
    "RegistrationService",
    "Saga",
    "admin_namespace",
    "extract_bearer_token",
]
