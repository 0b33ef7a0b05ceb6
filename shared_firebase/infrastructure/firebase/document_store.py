"""Firestore-backed document store (implements IDocumentStore)."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from shared_firebase.application.dtos.document import DocumentPage, StoredDocument
from shared_firebase.core.constants import MAX_BATCH_WRITES
from shared_firebase.domain.exceptions import (
    StoreOperationException,
    ValidationException,
    WriteFailureException,
)
from shared_firebase.infrastructure.firebase._rest_client import FirestoreRESTClient

logger = logging.getLogger(__name__)


class FirestoreDocumentStore:
    """Document store using the Firestore REST API. Same contract as InMemoryDocumentStore.

    REST reads are always answered by the backend (there is no client-side
    cache), so server_authoritative is satisfied by every list_page call.
    httpx errors are wrapped in domain exceptions and chained.
    """

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client

    async def read(self, path: str) -> StoredDocument | None:
        """Return the document at path, or None if it does not exist."""
        try:
            snapshot = await self._client.document(path).get()
        except httpx.HTTPError as e:
            raise StoreOperationException("read", path, f"read failed for {path}: {e}") from e
        if snapshot is None:
            return None
        return StoredDocument(path=snapshot.path, fields=snapshot.to_dict())

    async def write(self, path: str, fields: dict[str, Any]) -> None:
        """Overwrite the document at path with exactly fields."""
        try:
            await self._client.document(path).set(fields)
        except httpx.HTTPError as e:
            raise WriteFailureException("write", path, f"write failed for {path}: {e}") from e

    async def list_page(
        self,
        collection_path: str,
        page_size: int,
        *,
        server_authoritative: bool = True,
        start_after: str | None = None,
    ) -> DocumentPage:
        """Return up to page_size documents ordered by id, after start_after if given."""
        query = self._client.collection(collection_path).limit(page_size)
        if start_after is not None:
            query = query.start_after(start_after)
        documents: list[StoredDocument] = []
        try:
            async for snapshot in query.stream():
                documents.append(
                    StoredDocument(path=snapshot.path, fields=snapshot.to_dict())
                )
        except httpx.HTTPError as e:
            raise WriteFailureException(
                "list_page", collection_path, f"list failed for {collection_path}: {e}"
            ) from e
        logger.debug(
            "Listed %s document(s) from %s (page_size=%s, server=%s)",
            len(documents),
            collection_path,
            page_size,
            server_authoritative,
        )
        return DocumentPage(documents=documents, has_more=len(documents) == page_size)

    async def delete_batch(self, paths: Sequence[str]) -> None:
        """Delete paths in one atomic commit."""
        if not paths:
            return
        if len(paths) > MAX_BATCH_WRITES:
            raise ValidationException(
                f"A batch holds at most {MAX_BATCH_WRITES} deletes, got {len(paths)}",
                field="paths",
            )
        try:
            await self._client.commit_deletes(paths)
        except httpx.HTTPError as e:
            raise WriteFailureException(
                "delete_batch", paths[0], f"batch delete of {len(paths)} document(s) failed: {e}"
            ) from e
