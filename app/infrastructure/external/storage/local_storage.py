"""Local filesystem blob store with path validation and atomic writes."""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, cast

import aiofiles
import aiofiles.os

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
    StoragePermissionError,
    StoragePolicyError,
    StorageUploadError,
)
from app.infrastructure.external.storage.policies import (
    POLICY_CONTENT_TYPE,
    decode_policy,
    encode_policy,
    sha256_hex,
)
from app.infrastructure.security.jwt import create_download_token
from app.shared.utils.datetime import utc_now

DOWNLOAD_ROUTE = "/storage/download"
_META_SUFFIX = ".meta.json"
_NAMESPACE_MARKER = ".namespace"


class LocalStorageService:
    """Local filesystem storage with atomic writes and path traversal protection.

    Paths are validated against storage_root. Writes use temp file + rename.
    Metadata is stored in a .meta.json sidecar. Signed URLs carry a stateless
    JWT download grant that GET /storage/download/{token} resolves.
    """

    def __init__(self, storage_root: str, base_url: str | None = None) -> None:
        """Initialize local storage.

        Args:
            storage_root: Base directory for all files.
            base_url: Public base URL of this service (e.g. https://api.example.com).
        """
        self.storage_root = Path(storage_root).resolve()
        self.base_url = base_url.rstrip("/") if base_url else None
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, path: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / path.lstrip("/")).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(path, "path_validation") from e
        if full_path == self.storage_root or full_path.name.endswith(_META_SUFFIX):
            raise StoragePermissionError(path, "path_validation")
        return full_path

    @staticmethod
    def _meta_path(file_path: Path) -> Path:
        return file_path.with_name(file_path.name + _META_SUFFIX)

    async def _write_atomic(self, target_path: Path, content: bytes) -> None:
        target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
        temp_fd, temp_path = tempfile.mkstemp(dir=target_path.parent, prefix=".tmp_")
        os.close(temp_fd)
        try:
            async with aiofiles.open(temp_path, "wb") as f:
                await f.write(content)
            os.chmod(temp_path, 0o640)
            os.replace(temp_path, target_path)
        finally:
            if os.path.exists(temp_path):
                os.unlink(temp_path)

    async def _read_metadata(self, file_path: Path) -> dict[str, Any]:
        """Read JSON sidecar or empty dict."""
        meta_path = self._meta_path(file_path)
        if not meta_path.exists():
            return {}
        async with aiofiles.open(meta_path, "r") as f:
            result = json.loads(await f.read())
        return cast(dict[str, Any], result) if isinstance(result, dict) else {}

    async def put_object(
        self,
        path: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> ObjectRef:
        """Write data atomically (overwriting) and record a metadata sidecar."""
        target_path = self._get_full_path(path)
        checksum = sha256_hex(data)
        try:
            await self._write_atomic(target_path, data)
            sidecar = {
                "path": path,
                "checksum": checksum,
                "size": len(data),
                "content_type": content_type,
                "uploaded_at": utc_now().isoformat(),
                "custom": metadata or {},
            }
            await self._write_atomic(
                self._meta_path(target_path), json.dumps(sidecar, indent=2).encode()
            )
        except OSError as e:
            raise StorageUploadError(path, str(e)) from e
        return ObjectRef(path=path, size=len(data), checksum=checksum, content_type=content_type)

    async def get_object(self, path: str) -> bytes:
        file_path = self._get_full_path(path)
        if not file_path.is_file():
            raise StorageNotFoundError(path)
        try:
            async with aiofiles.open(file_path, "rb") as f:
                return await f.read()
        except OSError as e:
            raise StorageDownloadError(path, str(e)) from e

    async def stat_object(self, path: str) -> ObjectRef:
        file_path = self._get_full_path(path)
        if not file_path.is_file():
            raise StorageNotFoundError(path)
        stored = await self._read_metadata(file_path)
        return ObjectRef(
            path=path,
            size=file_path.stat().st_size,
            checksum=stored.get("checksum", ""),
            content_type=stored.get("content_type", "application/octet-stream"),
        )

    async def get_signed_url(self, ref: ObjectRef | str, expires_at: datetime) -> str:
        """Return a download URL carrying a signed grant valid until expires_at."""
        path = ref.path if isinstance(ref, ObjectRef) else ref
        self._get_full_path(path)
        route = f"{DOWNLOAD_ROUTE}/{create_download_token(path, expires_at)}"
        return f"{self.base_url}{route}" if self.base_url else route

    async def delete_object(self, path: str) -> bool:
        """Delete file and metadata. Returns True if deleted."""
        file_path = self._get_full_path(path)
        if not file_path.is_file():
            return False
        try:
            await aiofiles.os.remove(file_path)
            meta_path = self._meta_path(file_path)
            if meta_path.exists():
                await aiofiles.os.remove(meta_path)
        except OSError as e:
            raise StorageDeleteError(path, str(e)) from e
        self._prune_empty_dirs(file_path.parent)
        return True

    def _prune_empty_dirs(self, parent: Path) -> None:
        while parent != self.storage_root:
            try:
                if any(parent.iterdir()):
                    break
                parent.rmdir()
            except OSError:
                break
            parent = parent.parent

    async def exists(self, path: str) -> bool:
        return self._get_full_path(path).is_file()

    async def create_namespace(self, namespace: str) -> None:
        """Create the namespace directory with an empty marker file."""
        ns = normalize_namespace(namespace)
        await self.put_object(f"{ns}{_NAMESPACE_MARKER}", b"", "application/x-directory")

    async def delete_namespace(self, namespace: str) -> None:
        ns = normalize_namespace(namespace)
        await self.delete_object(f"{ns}{_NAMESPACE_MARKER}")
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
