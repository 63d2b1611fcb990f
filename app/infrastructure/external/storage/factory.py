"""Blob store factory: memory, local filesystem or S3 from settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.application.interfaces.stores import IBlobStore
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def create_blob_store(settings: "Settings") -> "IBlobStore":
    """Create the configured blob store ('memory', 'local' or 's3').

    Raises:
        ValueError: Unknown backend or missing bucket/root.
    """
    backend = settings.storage_backend
    if backend == "memory":
        from app.infrastructure.memory.blob_store import InMemoryBlobStore

        logger.warning("Using in-memory blob store; objects are lost on restart")
        return InMemoryBlobStore()
    if backend == "local":
        from app.infrastructure.external.storage.local_storage import LocalStorageService

        if not settings.storage_root:
            raise ValueError("STORAGE_ROOT required for local backend")
        if not settings.storage_base_url:
            logger.warning("STORAGE_BASE_URL not set; download URLs will be relative")
        return LocalStorageService(
            storage_root=settings.storage_root,
            base_url=settings.storage_base_url,
        )
    if backend == "s3":
        from app.infrastructure.external.storage.s3_storage import S3StorageService

        if not settings.s3_bucket:
            raise ValueError("S3_BUCKET required for s3 backend")
        secret = settings.s3_secret_key.get_secret_value() if settings.s3_secret_key else None
        return S3StorageService(
            bucket=settings.s3_bucket,
            region=settings.s3_region,
            endpoint_url=settings.s3_endpoint_url,
            access_key=settings.s3_access_key,
            secret_key=secret,
            signature_version=settings.s3_signature_version,
            timeout=settings.upstream_timeout_seconds,
        )
    raise ValueError(f"Unknown storage backend: {backend}. Supported: 'memory', 'local', 's3'")
