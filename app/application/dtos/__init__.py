"""Application DTOs (no backend dependency)."""

from app.application.dtos.account import RegistrationCommand, RegistrationResult
from app.application.dtos.document import StoredDocument
from app.application.dtos.identity import Identity, SignInResult
from app.application.dtos.project import (
    ImageResult,
    ProjectResult,
    StoredImage,
    UploadedImage,
)
from app.application.dtos.storage import ObjectRef

__all__ = [
    "Identity",
    "ImageResult",
    "ObjectRef",
    "ProjectResult",
    "RegistrationCommand",
    "RegistrationResult",
    "SignInResult",
    "StoredDocument",
    "StoredImage",
    "UploadedImage",
]
