"""In-memory backends for development and tests."""

from app.infrastructure.memory.blob_store import InMemoryBlobStore
from app.infrastructure.memory.document_store import InMemoryDocumentStore

__all__ = ["InMemoryBlobStore", "InMemoryDocumentStore"]
