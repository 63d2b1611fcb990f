"""Firebase integration over REST: Firestore document store and Firebase Auth."""

from app.infrastructure.firebase.auth_client import FirebaseIdentityProvider
from app.infrastructure.firebase.client import (
    create_firebase_identity_provider,
    create_firestore_client,
    load_service_account,
)
from app.infrastructure.firebase.document_store import FirestoreDocumentStore

__all__ = [
    "FirebaseIdentityProvider",
    "FirestoreDocumentStore",
    "create_firebase_identity_provider",
    "create_firestore_client",
    "load_service_account",
]
