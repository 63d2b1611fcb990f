"""Multi-image project upload: blobs first, then the nested project and image documents."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from app.application.dtos.project import StoredImage, UploadedImage
from app.application.interfaces.stores import IBlobStore, IDocumentStore
from app.application.services.saga import Saga
from app.domain.exceptions import GatewayException, UpstreamException, ValidationException
from app.shared.collections import images_path, project_path
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_blob_key, generate_cuid

logger = logging.getLogger(__name__)

IMAGES_PREFIX = "images"


class ProjectUploadService:
    """Stores up to max_images images for a new project owned by uid.

    Blob keys are generated (images/{uid}/{cuid}{ext}) so uploads never
    overwrite each other. If any step fails, already stored blobs and written
    documents are removed before the error propagates.
    """

    def __init__(
        self,
        documents: IDocumentStore,
        blobs: IBlobStore,
        url_expires_at: datetime,
        max_images: int = 5,
    ) -> None:
        self.documents = documents
        self.blobs = blobs
        self.url_expires_at = url_expires_at
        self.max_images = max_images

    async def _store_image(self, uid: str, image: UploadedImage, saga: Saga) -> StoredImage:
        path = generate_blob_key(IMAGES_PREFIX, uid, image.filename, image.content_type)
        ref = await self.blobs.put_object(
            path, image.data, image.content_type, metadata={"owner": uid}
        )
        saga.add_compensation(f"blob {path}", lambda: self.blobs.delete_object(path))
        url = await self.blobs.get_signed_url(ref, self.url_expires_at)
        return StoredImage(
            storage_path=path,
            url=url,
            original_filename=image.filename,
            content_type=image.content_type,
        )

    async def upload(
        self,
        uid: str,
        title: str | None,
        description: str | None,
        images: list[UploadedImage],
    ) -> str:
        """Upload images and write the project; return the new project id.

        Raises:
            ValidationException: More than max_images images.
            UpstreamException: A blob or document write failed.
        """
        if len(images) > self.max_images:
            raise ValidationException(
                f"At most {self.max_images} images are allowed per project", field="images"
            )
        saga = Saga("upload")
        project_id = generate_cuid()
        try:
            results = await asyncio.gather(
                *(self._store_image(uid, image, saga) for image in images),
                return_exceptions=True,
            )
            errors = [r for r in results if isinstance(r, BaseException)]
            if errors:
                raise errors[0]
            stored: list[StoredImage] = list(results)

            doc_path = project_path(uid, project_id)
            await self.documents.set_document(
                doc_path,
                {
                    "title": title,
                    "description": description,
                    "createdAt": utc_now(),
                    "imageCount": len(stored),
                },
            )
            saga.add_compensation("project document", lambda: self.documents.delete_document(doc_path))
            await asyncio.gather(
                *(
                    self._write_image_document(doc_path, position, image, saga)
                    for position, image in enumerate(stored)
                )
            )
        except Exception as e:
            logger.error("Project upload for %s failed: %s", uid, e)
            await saga.compensate()
            if isinstance(e, GatewayException):
                raise
            raise UpstreamException("Error uploading images") from e

        logger.info("Uploaded project %s with %d images for %s", project_id, len(images), uid)
        return project_id

    async def _write_image_document(
        self, doc_path: str, position: int, image: StoredImage, saga: Saga
    ) -> None:
        image_id = generate_cuid()
        path = f"{images_path(doc_path)}/{image_id}"
        await self.documents.set_document(
            path,
            {
                "imageUrl": image.url,
                "imageTitle": image.original_filename,
                "imageDescription": "",
                "storagePath": image.storage_path,
                "contentType": image.content_type,
                "position": position,
            },
        )
        saga.add_compensation(f"image document {image_id}", lambda: self.documents.delete_document(path))
