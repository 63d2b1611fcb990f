"""Project/image hierarchy reads: projects/{uid}/{collection}/{projectId}/images/{imageId}."""

from __future__ import annotations

import asyncio

from app.application.dtos.document import StoredDocument
from app.application.dtos.project import ImageResult, ProjectResult
from app.application.interfaces.stores import IDocumentStore
from app.domain.exceptions import ResourceNotFoundException
from app.shared.collections import images_path, project_path, projects_root_path


def _image_sort_key(image: ImageResult) -> tuple[bool, int, str]:
    return (image.position is None, image.position or 0, image.id)


class ProjectQueryService:
    """Resolves an account's projects and their nested images.

    Project collections are discovered by listing the sub-collections of
    projects/{uid}; the namespace document itself usually does not exist.
    """

    def __init__(self, documents: IDocumentStore) -> None:
        self.documents = documents

    async def _load_images(self, project_doc_path: str) -> list[ImageResult]:
        docs = await self.documents.list_documents(images_path(project_doc_path))
        images = [ImageResult.from_document(d.id, d.data) for d in docs]
        return sorted(images, key=_image_sort_key)

    async def _assemble(self, doc: StoredDocument) -> ProjectResult:
        images = await self._load_images(doc.path)
        return ProjectResult(
            id=doc.id,
            title=doc.data.get("title"),
            description=doc.data.get("description"),
            images=images,
        )

    async def list_projects(self, uid: str) -> list[ProjectResult]:
        """Return every project of every project collection, flattened.

        Raises:
            ResourceNotFoundException: The account has no project collections.
        """
        root = projects_root_path(uid)
        collections = await self.documents.list_subcollections(root)
        if not collections:
            raise ResourceNotFoundException(
                "projects", uid, "No projects found for this user"
            )
        per_collection = await asyncio.gather(
            *(self.documents.list_documents(f"{root}/{name}") for name in collections)
        )
        project_docs = [doc for docs in per_collection for doc in docs]
        return list(await asyncio.gather(*(self._assemble(doc) for doc in project_docs)))

    async def get_project(self, uid: str, project_id: str) -> ProjectResult:
        """Return one project with its images (images may be empty).

        Raises:
            ResourceNotFoundException: No project document at that id.
        """
        doc = await self.documents.get_document(project_path(uid, project_id))
        if doc is None:
            raise ResourceNotFoundException("project", project_id, "Project not found")
        return await self._assemble(doc)
