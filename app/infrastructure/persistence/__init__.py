"""Document store selection."""

from app.infrastructure.persistence.factory import create_document_store

__all__ = ["create_document_store"]
