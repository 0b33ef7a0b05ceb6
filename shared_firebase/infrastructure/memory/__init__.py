"""In-memory document store for tests and local runs."""

from shared_firebase.infrastructure.memory.document_store import (
    InMemoryDocumentStore,
    StoreCall,
)

__all__ = ["InMemoryDocumentStore", "StoreCall"]
