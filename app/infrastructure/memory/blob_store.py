"""In-memory blob store for development and tests (implements IBlobStore)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from urllib.parse import quote

from app.application.dtos.storage import ObjectRef
from app.domain.value_objects.access_policy import (
    AccessPolicy,
    normalize_namespace,
    rules_path,
)
from app.infrastructure.exceptions import StorageNotFoundError
from app.infrastructure.external.storage.policies import (
    POLICY_CONTENT_TYPE,
    decode_policy,
    encode_policy,
    sha256_hex,
)


@dataclass
class StoredObject:
    data: bytes
    content_type: str
    metadata: dict[str, str] = field(default_factory=dict)


class InMemoryBlobStore:
    """Test double for blob storage. Signed URLs are fake but deterministic."""

    def __init__(self, base_url: str = "memory://blobs") -> None:
        self.base_url = base_url.rstrip("/")
        self.objects: dict[str, StoredObject] = {}

    def _ref(self, path: str, obj: StoredObject) -> ObjectRef:
        return ObjectRef(
            path=path,
            size=len(obj.data),
            checksum=sha256_hex(obj.data),
            content_type=obj.content_type,
        )

    async def put_object(
        self,
        path: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> ObjectRef:
        obj = StoredObject(bytes(data), content_type, dict(metadata or {}))
        self.objects[path] = obj
        return self._ref(path, obj)

    async def get_object(self, path: str) -> bytes:
        obj = self.objects.get(path)
        if obj is None:
            raise StorageNotFoundError(path)
        return obj.data

    async def stat_object(self, path: str) -> ObjectRef:
        obj = self.objects.get(path)
        if obj is None:
            raise StorageNotFoundError(path)
        return self._ref(path, obj)

    async def get_signed_url(self, ref: ObjectRef | str, expires_at: datetime) -> str:
        path = ref.path if isinstance(ref, ObjectRef) else ref
        return f"{self.base_url}/{quote(path)}?expires={int(expires_at.timestamp())}"

    async def delete_object(self, path: str) -> bool:
        return self.objects.pop(path, None) is not None

    async def exists(self, path: str) -> bool:
        return path in self.objects

    async def create_namespace(self, namespace: str) -> None:
        await self.put_object(normalize_namespace(namespace), b"", "application/x-directory")

    async def delete_namespace(self, namespace: str) -> None:
        self.objects.pop(normalize_namespace(namespace), None)
        self.objects.pop(rules_path(namespace), None)

    async def set_access_policy(self, namespace: str, policy: AccessPolicy) -> None:
        await self.put_object(rules_path(namespace), encode_policy(policy), POLICY_CONTENT_TYPE)

    async def get_access_policy(self, namespace: str) -> AccessPolicy | None:
        obj = self.objects.get(rules_path(namespace))
        if obj is None:
            return None
        return decode_policy(namespace, obj.data)

    async def aclose(self) -> None:
        return None

    def reset(self) -> None:
        """Clear all stored objects (useful in tests)."""
        self.objects.clear()
