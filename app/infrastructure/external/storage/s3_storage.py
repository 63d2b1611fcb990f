"""S3-compatible blob store (AWS S3, MinIO, etc.) with checksums and presigned URLs."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.application.dtos.storage import ObjectRef
from app.domain.value_objects.access_policy import (
    AccessPolicy,
    normalize_namespace,
    rules_path,
)
from app.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StoragePolicyError,
    StorageUploadError,
)
from app.infrastructure.external.storage.policies import (
    POLICY_CONTENT_TYPE,
    decode_policy,
    encode_policy,
    sha256_hex,
)
from app.shared.utils.datetime import seconds_until

logger = logging.getLogger(__name__)

SIGV4_MAX_EXPIRY_SECONDS = 7 * 24 * 3600
_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _is_not_found(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES


class S3StorageService:
    """S3-compatible storage with server-side encryption and presigned URLs.

    Uses boto3 (sync) via asyncio.to_thread for async API. Compatible with
    AWS S3, MinIO, DigitalOcean Spaces.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        signature_version: str = "s3",
        timeout: float = 30.0,
        client: Any = None,
    ) -> None:
        """Initialize S3 client.

        Args:
            bucket: Bucket name.
            region: AWS region.
            endpoint_url: Custom endpoint (MinIO/Spaces).
            access_key: Optional; uses env/IAM if not set.
            secret_key: Optional.
            signature_version: 's3' (SigV2, any expiry) or 's3v4' (capped at 7 days).
            timeout: Connect and read timeout in seconds.
            client: Prebuilt boto3 S3 client (tests).
        """
        self.bucket = bucket
        self.signature_version = signature_version
        if client is not None:
            self._client = client
            return
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            config=Config(
                signature_version=signature_version,
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={"max_attempts": 3, "mode": "standard"},
            ),
            **extra,
        )

    async def put_object(
        self,
        path: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> ObjectRef:
        """Upload bytes (overwrite). Checksum is stored in object metadata."""
        checksum = sha256_hex(data)
        meta = {"sha256": checksum}
        for k, v in (metadata or {}).items():
            meta[k.lower().replace("_", "-")] = v

        def _put() -> None:
            self._client.put_object(
                Bucket=self.bucket,
                Key=path,
                Body=data,
                ContentType=content_type,
                ServerSideEncryption="AES256",
                Metadata=meta,
            )

        try:
            await asyncio.to_thread(_put)
        except (ClientError, BotoCoreError) as e:
            raise StorageUploadError(path, str(e)) from e
        return ObjectRef(path=path, size=len(data), checksum=checksum, content_type=content_type)

    async def get_object(self, path: str) -> bytes:
        def _get() -> bytes:
            return self._client.get_object(Bucket=self.bucket, Key=path)["Body"].read()

        try:
            return await asyncio.to_thread(_get)
        except ClientError as e:
            if _is_not_found(e):
                raise StorageNotFoundError(path) from e
            raise StorageDownloadError(path, str(e)) from e
        except BotoCoreError as e:
            raise StorageDownloadError(path, str(e)) from e

    async def stat_object(self, path: str) -> ObjectRef:
        def _head() -> dict[str, Any]:
            return self._client.head_object(Bucket=self.bucket, Key=path)

        try:
            head = await asyncio.to_thread(_head)
        except ClientError as e:
            if _is_not_found(e):
                raise StorageNotFoundError(path) from e
            raise StorageDownloadError(path, str(e)) from e
        except BotoCoreError as e:
            raise StorageDownloadError(path, str(e)) from e
        return ObjectRef(
            path=path,
            size=head["ContentLength"],
            checksum=(head.get("Metadata") or {}).get("sha256", ""),
            content_type=head.get("ContentType", "application/octet-stream"),
        )

    def _expiry_seconds(self, expires_at: datetime) -> int:
        seconds = max(1, seconds_until(expires_at))
        if self.signature_version == "s3v4" and seconds > SIGV4_MAX_EXPIRY_SECONDS:
            logger.warning(
                "SigV4 presigned URLs expire after at most 7 days; clamping expiry %s",
                expires_at.isoformat(),
            )
            return SIGV4_MAX_EXPIRY_SECONDS
        return seconds

    async def get_signed_url(self, ref: ObjectRef | str, expires_at: datetime) -> str:
        """Return a presigned GET URL (offline signing, no network call)."""
        path = ref.path if isinstance(ref, ObjectRef) else ref
        expires_in = self._expiry_seconds(expires_at)

        def _presign() -> str:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": path},
                ExpiresIn=expires_in,
            )

        try:
            return await asyncio.to_thread(_presign)
        except (ClientError, BotoCoreError) as e:
            raise StorageDownloadError(path, str(e)) from e

    async def delete_object(self, path: str) -> bool:
        """Delete object. Returns True if it existed."""
        def _delete() -> bool:
            try:
                self._client.head_object(Bucket=self.bucket, Key=path)
            except ClientError as e:
                if _is_not_found(e):
                    return False
                raise
            self._client.delete_object(Bucket=self.bucket, Key=path)
            return True

        try:
            return await asyncio.to_thread(_delete)
        except (ClientError, BotoCoreError) as e:
            raise StorageDeleteError(path, str(e)) from e

    async def exists(self, path: str) -> bool:
        try:
            await self.stat_object(path)
        except StorageNotFoundError:
            return False
        return True

    async def create_namespace(self, namespace: str) -> None:
        """Write the zero-byte 'folder' key (e.g. 'admin/<uid>/')."""
        await self.put_object(normalize_namespace(namespace), b"", "application/x-directory")

    async def delete_namespace(self, namespace: str) -> None:
        ns = normalize_namespace(namespace)
        await self.delete_object(ns)
        await self.delete_object(rules_path(ns))

    async def set_access_policy(self, namespace: str, policy: AccessPolicy) -> None:
        try:
            await self.put_object(rules_path(namespace), encode_policy(policy), POLICY_CONTENT_TYPE)
        except StorageUploadError as e:
            raise StoragePolicyError(namespace, e.details.get("reason", str(e))) from e

    async def get_access_policy(self, namespace: str) -> AccessPolicy | None:
        try:
            raw = await self.get_object(rules_path(namespace))
        except StorageNotFoundError:
            return None
        return decode_policy(namespace, raw)

    async def aclose(self) -> None:
        return None
