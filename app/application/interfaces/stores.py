"""Store interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
Paths are slash-separated: a document path has an even number of segments
(collection/doc[/collection/doc...]), a collection path an odd number.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.document import StoredDocument
    from app.application.dtos.storage import ObjectRef
    from app.domain.value_objects.access_policy import AccessPolicy


class IDocumentStore(Protocol):
    """Protocol for a hierarchical document database (DIP)."""

    async def get_document(self, path: str) -> StoredDocument | None:
        """Return the document at path, or None if it does not exist."""

    async def set_document(self, path: str, fields: dict[str, Any]) -> None:
        """Create or fully overwrite the document at path."""

    async def update_document(self, path: str, fields: dict[str, Any]) -> None:
        """Merge fields into an existing document. Raises DocumentNotFoundError if absent."""

    async def add_document(self, collection_path: str, fields: dict[str, Any]) -> str:
        """Create a document with a store-assigned id; return the id."""

    async def delete_document(self, path: str) -> None:
        """Delete the document at path (no-op if missing). Sub-collections are kept."""

    async def list_documents(self, collection_path: str) -> list[StoredDocument]:
        """Return every document directly in the collection, sorted by id."""

    async def list_subcollections(self, document_path: str) -> list[str]:
        """Return names of sub-collections under a document path, sorted.

        Works even when the document itself does not exist.
        """

    async def aclose(self) -> None:
        """Release network resources."""


class IBlobStore(Protocol):
    """Protocol for a binary object store with signed URLs and namespace policies (DIP)."""

    async def put_object(
        self,
        path: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> ObjectRef:
        """Store bytes at path (overwrite) and return a reference."""

    async def get_object(self, path: str) -> bytes:
        """Return object bytes. Raises StorageNotFoundError if missing."""

    async def stat_object(self, path: str) -> ObjectRef:
        """Return size, checksum and content type. Raises StorageNotFoundError if missing."""

    async def get_signed_url(self, ref: ObjectRef | str, expires_at: datetime) -> str:
        """Return a read URL valid until expires_at."""

    async def delete_object(self, path: str) -> bool:
        """Delete object; True if it existed."""

    async def exists(self, path: str) -> bool:
        """Return True if an object exists at path."""

    async def create_namespace(self, namespace: str) -> None:
        """Create the placeholder object marking a namespace (e.g. 'admin/<uid>/')."""

    async def delete_namespace(self, namespace: str) -> None:
        """Remove the namespace placeholder and its access policy (objects inside are kept)."""

    async def set_access_policy(self, namespace: str, policy: AccessPolicy) -> None:
        """Persist the access policy governing namespace."""

    async def get_access_policy(self, namespace: str) -> AccessPolicy | None:
        """Return the persisted policy for namespace, or None."""

    async def aclose(self) -> None:
        """Release network resources."""
