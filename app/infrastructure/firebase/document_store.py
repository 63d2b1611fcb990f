"""Firestore-backed document store (implements IDocumentStore)."""

from __future__ import annotations

from typing import Any

from app.application.dtos.document import StoredDocument
from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from app.shared.utils.paths import collection_path, document_path


class FirestoreDocumentStore:
    """Path-based document store over the Firestore REST client."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client

    async def get_document(self, path: str) -> StoredDocument | None:
        snapshot = await self._client.document(document_path(path)).get()
        if snapshot is None:
            return None
        return StoredDocument(id=snapshot.id, path=snapshot.path, data=snapshot.to_dict())

    async def set_document(self, path: str, fields: dict[str, Any]) -> None:
        await self._client.document(document_path(path)).set(fields)

    async def update_document(self, path: str, fields: dict[str, Any]) -> None:
        await self._client.document(document_path(path)).update(fields)

    async def add_document(self, collection: str, fields: dict[str, Any]) -> str:
        return await self._client.collection(collection_path(collection)).add(fields)

    async def delete_document(self, path: str) -> None:
        await self._client.document(document_path(path)).delete()

    async def list_documents(self, collection: str) -> list[StoredDocument]:
        docs = [
            StoredDocument(id=s.id, path=s.path, data=s.to_dict())
            async for s in self._client.collection(collection_path(collection)).stream()
        ]
        return sorted(docs, key=lambda d: d.id)

    async def list_subcollections(self, path: str) -> list[str]:
        ids = await self._client.document(document_path(path)).list_collection_ids()
        return sorted(ids)

    async def aclose(self) -> None:
        await self._client.aclose()
