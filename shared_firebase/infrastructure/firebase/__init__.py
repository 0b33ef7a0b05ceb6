"""Firestore integration (REST API + google-auth)."""

from shared_firebase.infrastructure.firebase.client import create_firestore_client
from shared_firebase.infrastructure.firebase.document_store import (
    FirestoreDocumentStore,
)

__all__ = [
    "FirestoreDocumentStore",
    "create_firestore_client",
]
