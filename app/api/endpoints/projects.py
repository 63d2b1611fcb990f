"""Project endpoints: multi-image upload and nested project reads."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile

from app.api.dependencies import (
    get_current_identity,
    get_project_query_service,
    get_project_upload_service,
    require_account_access,
)
from app.application.dtos.identity import Identity
from app.application.dtos.project import UploadedImage
from app.application.use_cases.projects import ProjectQueryService, ProjectUploadService
from app.schemas.project import ProjectResponse, UploadResponse

router = APIRouter()


@router.post("/upload", response_model=UploadResponse)
async def upload_project(
    identity: Annotated[Identity, Depends(get_current_identity)],
    uploads: Annotated[ProjectUploadService, Depends(get_project_upload_service)],
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    images: Annotated[list[UploadFile] | None, File()] = None,
) -> UploadResponse:
    """Create a project for the caller from up to five images."""
    files = [
        UploadedImage(
            filename=f.filename or "image",
            content_type=f.content_type or "application/octet-stream",
            data=await f.read(),
        )
        for f in images or []
    ]
    project_id = await uploads.upload(identity.uid, title, description, files)
    return UploadResponse(project_id=project_id)


@router.get("/api/projects/images/{projectId}/{userId}", response_model=ProjectResponse)
async def get_project(
    project_id: Annotated[str, Path(alias="projectId", min_length=1)],
    user_id: Annotated[str, Depends(require_account_access)],
    projects: Annotated[ProjectQueryService, Depends(get_project_query_service)],
) -> ProjectResponse:
    """One project with its images."""
    return ProjectResponse.from_result(await projects.get_project(user_id, project_id))


@router.get("/api/projects/{userId}", response_model=list[ProjectResponse])
async def list_projects(
    user_id: Annotated[str, Depends(require_account_access)],
    projects: Annotated[ProjectQueryService, Depends(get_project_query_service)],
) -> list[ProjectResponse]:
    """Every project of every project collection of the account."""
    return [ProjectResponse.from_result(p) for p in await projects.list_projects(user_id)]
