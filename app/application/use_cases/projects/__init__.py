"""Project use cases."""

from app.application.use_cases.projects.project_query import ProjectQueryService
from app.application.use_cases.projects.project_upload import ProjectUploadService

__all__ = ["ProjectQueryService", "ProjectUploadService"]
