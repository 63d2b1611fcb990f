"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (document store, blob store,
identity provider).
"""

from app.application.interfaces import IBlobStore, IDocumentStore, IIdentityProvider
from app.application.services import IdentityVerifier, RegistrationService
from app.application.use_cases import (
    AccountQueryService,
    ProfileImageService,
    ProjectQueryService,
    ProjectUploadService,
)

__all__ = [
    "AccountQueryService",
    "IBlobStore",
    "IDocumentStore",
    "IIdentityProvider",
    "IdentityVerifier",
    "ProfileImageService",
    "ProjectQueryService",
    "ProjectUploadService",
    "RegistrationService",
]
