"""Profile image upload and lookup (users/{uid}.profileUrl)."""

from __future__ import annotations

import logging
from datetime import datetime

from app.application.dtos.project import UploadedImage
from app.application.interfaces.stores import IBlobStore, IDocumentStore
from app.application.services.saga import Saga
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.shared.collections import user_path
from app.shared.utils.generators import generate_blob_key

logger = logging.getLogger(__name__)

PROFILES_PREFIX = "profiles"


class ProfileImageService:
    """Stores a profile image and records its signed URL on the account document."""

    def __init__(
        self,
        documents: IDocumentStore,
        blobs: IBlobStore,
        url_expires_at: datetime,
    ) -> None:
        self.documents = documents
        self.blobs = blobs
        self.url_expires_at = url_expires_at

    async def upload(self, uid: str, image: UploadedImage | None) -> str:
        """Store image under profiles/{uid}/ and return its download URL.

        The blob path is kept as profilePath next to profileUrl so the
        previous image can be removed once the account points at the new one.

        Raises:
            ValidationException: No image (or an empty one) was sent.
            ResourceNotFoundException: The account does not exist.
        """
        if image is None or not image.data:
            raise ValidationException("No profile image provided", field="profileImage")
        account = await self.documents.get_document(user_path(uid))
        if account is None:
            raise ResourceNotFoundException("user", uid, "User not found")
        previous_path = account.data.get("profilePath")

        path = generate_blob_key(PROFILES_PREFIX, uid, image.filename, image.content_type)
        saga = Saga("profile image")
        ref = await self.blobs.put_object(
            path, image.data, image.content_type, metadata={"owner": uid}
        )
        saga.add_compensation(f"blob {path}", lambda: self.blobs.delete_object(path))
        try:
            url = await self.blobs.get_signed_url(ref, self.url_expires_at)
            await self.documents.update_document(
                user_path(uid), {"profileUrl": url, "profilePath": path}
            )
        except Exception:
            await saga.compensate()
            raise
        logger.info("Stored profile image %s for %s", path, uid)

        if previous_path and previous_path != path:
            await self._remove_previous(uid, previous_path)
        return url

    async def _remove_previous(self, uid: str, path: str) -> None:
        if not path.startswith(f"{PROFILES_PREFIX}/{uid}/"):
            logger.warning("Ignoring profilePath %s outside %s/%s/", path, PROFILES_PREFIX, uid)
            return
        try:
            await self.blobs.delete_object(path)
        except Exception:
            logger.exception("Could not remove previous profile image %s", path)

    async def get_profile_url(self, uid: str) -> str | None:
        """Return the stored profileUrl (None if never uploaded)."""
        doc = await self.documents.get_document(user_path(uid))
        if doc is None:
            raise ResourceNotFoundException("user", uid, "User not found")
        return doc.data.get("profileUrl")
