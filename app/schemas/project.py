"""Project and image API schemas."""

from pydantic import Field

from app.application.dtos.project import ImageResult, ProjectResult
from app.schemas.base import CamelModel


class ImageResponse(CamelModel):
    id: str
    image_url: str | None = None
    image_title: str | None = None
    image_description: str | None = None

    @classmethod
    def from_result(cls, image: ImageResult) -> "ImageResponse":
        return cls(
            id=image.id,
            image_url=image.image_url,
            image_title=image.image_title,
            image_description=image.image_description,
        )


class ProjectResponse(CamelModel):
    """A project with its images ordered by upload position."""

    id: str
    title: str | None = None
    description: str | None = None
    images: list[ImageResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, project: ProjectResult) -> "ProjectResponse":
        return cls(
            id=project.id,
            title=project.title,
            description=project.description,
            images=[ImageResponse.from_result(i) for i in project.images],
        )


class UploadResponse(CamelModel):
    """Response for POST /upload."""

    message: str = "Upload successful"
    project_id: str
