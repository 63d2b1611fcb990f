"""DTOs for the project/image hierarchy (read-models and upload input)."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ImageResult:
    """Image read-model assembled from an image document."""

    id: str
    image_url: str | None
    image_title: str | None = None
    image_description: str | None = None
    position: int | None = None

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> "ImageResult":
        position = data.get("position")
        return cls(
            id=doc_id,
            image_url=data.get("imageUrl"),
            image_title=data.get("imageTitle"),
            image_description=data.get("imageDescription"),
            position=position if isinstance(position, int) else None,
        )


@dataclass(frozen=True)
class ProjectResult:
    """Project read-model with its nested images."""

    id: str
    title: str | None
    description: str | None
    images: list[ImageResult] = field(default_factory=list)


@dataclass(frozen=True)
class UploadedImage:
    """One image part of a multipart upload, fully buffered."""

    filename: str
    content_type: str
    data: bytes


@dataclass(frozen=True)
class StoredImage:
    """Blob uploaded for a project image, with its issued URL."""

    storage_path: str
    url: str
    original_filename: str
    content_type: str
