"""Presentation-layer dependency injection (composition root).

Backends live on app.state (set by create_app() or the lifespan). Use cases
and the auth gate are built here; routes depend only on these dependencies,
not on infrastructure directly.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, Path, Request

from app.application.dtos.identity import Identity
from app.application.interfaces.services import IIdentityProvider
from app.application.interfaces.stores import IBlobStore, IDocumentStore
from app.application.services.identity_verifier import IdentityVerifier
from app.application.services.registration_service import RegistrationService
from app.application.use_cases.accounts import AccountQueryService, ProfileImageService
from app.application.use_cases.projects import ProjectQueryService, ProjectUploadService
from app.core.config import get_settings
from app.domain.exceptions import ForbiddenException, ResourceNotFoundException
from app.infrastructure.security.jwt import verify_download_token
from app.shared.context import set_current_uid

# ---- Backends ----


def get_document_store(request: Request) -> IDocumentStore:
    return request.app.state.document_store


def get_blob_store(request: Request) -> IBlobStore:
    return request.app.state.blob_store


def get_identity_provider(request: Request) -> IIdentityProvider:
    return request.app.state.identity_provider


# ---- Auth gate ----


def get_identity_verifier(
    provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
) -> IdentityVerifier:
    return IdentityVerifier(provider)


async def get_current_identity(
    verifier: Annotated[IdentityVerifier, Depends(get_identity_verifier)],
    authorization: Annotated[str | None, Header()] = None,
) -> Identity:
    """Verify the bearer credential; 401 on any failure."""
    identity = await verifier.verify(authorization)
    set_current_uid(identity.uid)
    return identity


async def require_account_access(
    identity: Annotated[Identity, Depends(get_current_identity)],
    user_id: Annotated[str, Path(alias="userId", min_length=1)],
) -> str:
    """Return the path userId if the caller owns it or is an admin; else 403."""
    if identity.uid != user_id and not identity.is_admin:
        raise ForbiddenException()
    return user_id


async def require_admin(
    identity: Annotated[Identity, Depends(get_current_identity)],
) -> Identity:
    if not identity.is_admin:
        raise ForbiddenException()
    return identity


# ---- Use cases ----


def get_registration_service(
    identity: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    documents: Annotated[IDocumentStore, Depends(get_document_store)],
    blobs: Annotated[IBlobStore, Depends(get_blob_store)],
) -> RegistrationService:
    return RegistrationService(identity, documents, blobs)


def get_account_query_service(
    documents: Annotated[IDocumentStore, Depends(get_document_store)],
) -> AccountQueryService:
    return AccountQueryService(documents)


def get_profile_image_service(
    documents: Annotated[IDocumentStore, Depends(get_document_store)],
    blobs: Annotated[IBlobStore, Depends(get_blob_store)],
) -> ProfileImageService:
    return ProfileImageService(documents, blobs, get_settings().signed_url_expires_at)


def get_project_query_service(
    documents: Annotated[IDocumentStore, Depends(get_document_store)],
) -> ProjectQueryService:
    return ProjectQueryService(documents)


def get_project_upload_service(
    documents: Annotated[IDocumentStore, Depends(get_document_store)],
    blobs: Annotated[IBlobStore, Depends(get_blob_store)],
) -> ProjectUploadService:
    settings = get_settings()
    return ProjectUploadService(
        documents,
        blobs,
        url_expires_at=settings.signed_url_expires_at,
        max_images=settings.max_project_images,
    )


# ---- Local storage downloads ----


def resolve_download_path(token: str) -> str:
    """Object path granted by a signed download token; 404 when invalid or expired."""
    try:
        return verify_download_token(token)
    except ValueError as e:
        raise ResourceNotFoundException("file", "download", "File not found") from e
