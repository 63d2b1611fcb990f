"""In-memory document store for development and tests (implements IDocumentStore)."""

from __future__ import annotations

import asyncio
import copy
from typing import Any

from app.application.dtos.document import StoredDocument
from app.infrastructure.exceptions import DocumentNotFoundError
from app.shared.utils.generators import generate_cuid
from app.shared.utils.paths import collection_path, document_path


class InMemoryDocumentStore:
    """Documents keyed by full path. Sub-collections are derived from key prefixes,
    so they are visible even when the parent document was never written."""

    def __init__(self) -> None:
        self.documents: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def get_document(self, path: str) -> StoredDocument | None:
        path = document_path(path)
        data = self.documents.get(path)
        if data is None:
            return None
        return StoredDocument(id=path.rsplit("/", 1)[-1], path=path, data=copy.deepcopy(data))

    async def set_document(self, path: str, fields: dict[str, Any]) -> None:
        path = document_path(path)
        async with self._lock:
            self.documents[path] = copy.deepcopy(fields)

    async def update_document(self, path: str, fields: dict[str, Any]) -> None:
        path = document_path(path)
        async with self._lock:
            if path not in self.documents:
                raise DocumentNotFoundError(path)
            self.documents[path].update(copy.deepcopy(fields))

    async def add_document(self, collection: str, fields: dict[str, Any]) -> str:
        collection = collection_path(collection)
        doc_id = generate_cuid()
        await self.set_document(f"{collection}/{doc_id}", fields)
        return doc_id

    async def delete_document(self, path: str) -> None:
        path = document_path(path)
        async with self._lock:
            self.documents.pop(path, None)

    async def list_documents(self, collection: str) -> list[StoredDocument]:
        collection = collection_path(collection)
        depth = collection.count("/") + 2
        prefix = f"{collection}/"
        return [
            StoredDocument(id=p.rsplit("/", 1)[-1], path=p, data=copy.deepcopy(d))
            for p, d in sorted(self.documents.items())
            if p.startswith(prefix) and p.count("/") + 1 == depth
        ]

    async def list_subcollections(self, path: str) -> list[str]:
        path = document_path(path)
        prefix = f"{path}/"
        names = {p[len(prefix):].split("/", 1)[0] for p in self.documents if p.startswith(prefix)}
        return sorted(names)

    async def aclose(self) -> None:
        return None

    def reset(self) -> None:
        """Clear all stored documents (useful in tests)."""
        self.documents.clear()
