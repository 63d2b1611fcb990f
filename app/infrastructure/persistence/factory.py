"""Document store factory: Firestore or in-memory from settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.application.interfaces.stores import IDocumentStore
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def create_document_store(settings: "Settings") -> "IDocumentStore":
    """Create the configured document store ('firestore' or 'memory').

    Raises:
        ValueError: Unknown backend.
    """
    backend = settings.document_backend
    if backend == "memory":
        from app.infrastructure.memory.document_store import InMemoryDocumentStore

        logger.warning("Using in-memory document store; data is lost on restart")
        return InMemoryDocumentStore()
    if backend == "firestore":
        from app.infrastructure.firebase import (
            FirestoreDocumentStore,
            create_firestore_client,
        )

        return FirestoreDocumentStore(create_firestore_client(settings))
    raise ValueError(f"Unknown document backend: {backend}. Supported: 'firestore', 'memory'")
