"""Document store interface (port) required by the tree copy/delete engine.

Implemented by FirestoreDocumentStore (REST) and InMemoryDocumentStore (tests).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from shared_firebase.application.dtos.document import DocumentPage, StoredDocument


class IDocumentStore(Protocol):
    """Protocol for the remote document store (DIP)."""

    async def read(self, path: str) -> StoredDocument | None:
        """Return the document at path, or None when it does not exist."""

    async def write(self, path: str, fields: dict[str, Any]) -> None:
        """Create or fully overwrite the document at path (no field merge).

        Raises WriteFailureException on failure.
        """

    async def list_page(
        self,
        collection_path: str,
        page_size: int,
        *,
        server_authoritative: bool = True,
        start_after: str | None = None,
    ) -> DocumentPage:
        """Return up to page_size documents of the collection, ordered by document id.

        Each call is an independent query reflecting current state. start_after
        is a document id cursor; documents with ids <= start_after are skipped.
        server_authoritative bypasses any local cache. Raises
        WriteFailureException on failure.
        """

    async def delete_batch(self, paths: Sequence[str]) -> None:
        """Delete all documents in paths as one atomic batch (all-or-nothing).

        Raises WriteFailureException on failure.
        """
