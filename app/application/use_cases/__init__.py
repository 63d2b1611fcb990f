"""Application use cases: account reads, profile images, project reads and uploads."""

from app.application.use_cases.accounts import AccountQueryService, ProfileImageService
from app.application.use_cases.projects import ProjectQueryService, ProjectUploadService

__all__ = [
    "AccountQueryService",
    "ProfileImageService",
    "ProjectQueryService",
    "ProjectUploadService",
]
