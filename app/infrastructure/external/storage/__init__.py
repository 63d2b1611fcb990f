"""Blob storage backends: local filesystem and S3-compatible.

Every backend implements app.application.interfaces.IBlobStore (objects,
signed URLs, namespaces and access policies); create_blob_store picks one
from settings.
"""

from app.infrastructure.external.storage.factory import create_blob_store
from app.infrastructure.external.storage.local_storage import LocalStorageService
from app.infrastructure.external.storage.s3_storage import S3StorageService

__all__ = ["LocalStorageService", "S3StorageService", "create_blob_store"]
