"""DTOs exchanged between the engine and document store implementations."""

from shared_firebase.application.dtos.document import (
    DocumentPage,
    StoredDocument,
    TreeOperationResult,
)

__all__ = ["DocumentPage", "StoredDocument", "TreeOperationResult"]
