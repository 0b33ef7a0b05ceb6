"""In-memory document store (implements IDocumentStore).

Mirrors the Firestore paging and batch semantics: list pages are ordered by
document id and reflect current state, delete batches are all-or-nothing.
Every call is recorded, and failures can be injected per path, so tests can
assert exact call sequences and partial-failure behavior.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from shared_firebase.application.dtos.document import DocumentPage, StoredDocument
from shared_firebase.core.constants import MAX_BATCH_WRITES
from shared_firebase.domain.exceptions import ValidationException, WriteFailureException


@dataclass(frozen=True)
class StoreCall:
    """One recorded store call: operation name, target path, and size (page or batch)."""

    operation: str
    path: str
    size: int = 0


def _parent(path: str) -> str:
    return path.rsplit("/", 1)[0]


class InMemoryDocumentStore:
    """Document store held in a dict keyed by document path."""

    def __init__(
        self,
        documents: dict[str, dict[str, Any]] | None = None,
        *,
        fail_writes_to: Iterable[str] = (),
        fail_deletes_in: Iterable[str] = (),
        vanish_on_read: Iterable[str] = (),
    ) -> None:
        """Initialize with optional seed data and failure injection.

        Args:
            documents: Initial documents, path -> fields.
            fail_writes_to: Document paths whose write raises WriteFailureException.
            fail_deletes_in: Collection paths; a batch deleting any document
                directly inside one of them raises WriteFailureException and
                deletes nothing.
            vanish_on_read: Document paths that still appear in list pages but
                read as missing (deleted between list and read).
        """
        self._docs: dict[str, dict[str, Any]] = {}
        for path, fields in (documents or {}).items():
            self._docs[path] = copy.deepcopy(fields)
        self.fail_writes_to = set(fail_writes_to)
        self.fail_deletes_in = set(fail_deletes_in)
        self.vanish_on_read = set(vanish_on_read)
        self.calls: list[StoreCall] = []

    # ---- IDocumentStore ----

    async def read(self, path: str) -> StoredDocument | None:
        self.calls.append(StoreCall("read", path))
        if path in self.vanish_on_read or path not in self._docs:
            return None
        return StoredDocument(path=path, fields=copy.deepcopy(self._docs[path]))

    async def write(self, path: str, fields: dict[str, Any]) -> None:
        self.calls.append(StoreCall("write", path, len(fields)))
        if path in self.fail_writes_to:
            raise WriteFailureException("write", path, f"injected write failure for {path}")
        self._docs[path] = copy.deepcopy(fields)

    async def list_page(
        self,
        collection_path: str,
        page_size: int,
        *,
        server_authoritative: bool = True,
        start_after: str | None = None,
    ) -> DocumentPage:
        self.calls.append(StoreCall("list_page", collection_path, page_size))
        prefix = f"{collection_path}/"
        ids = sorted(
            path[len(prefix):]
            for path in self._docs
            if path.startswith(prefix) and "/" not in path[len(prefix):]
        )
        if start_after is not None:
            ids = [doc_id for doc_id in ids if doc_id > start_after]
        documents = [
            StoredDocument(
                path=f"{prefix}{doc_id}",
                fields=copy.deepcopy(self._docs[f"{prefix}{doc_id}"]),
            )
            for doc_id in ids[:page_size]
        ]
        return DocumentPage(documents=documents, has_more=len(documents) == page_size)

    async def delete_batch(self, paths: Sequence[str]) -> None:
        if not paths:
            return
        self.calls.append(StoreCall("delete_batch", paths[0], len(paths)))
        if len(paths) > MAX_BATCH_WRITES:
            raise ValidationException(
                f"A batch holds at most {MAX_BATCH_WRITES} deletes, got {len(paths)}",
                field="paths",
            )
        for path in paths:
            if _parent(path) in self.fail_deletes_in:
                raise WriteFailureException(
                    "delete_batch", path, f"injected delete failure in {_parent(path)}"
                )
        for path in paths:
            self._docs.pop(path, None)

    # ---- Test helpers ----

    def get(self, path: str) -> dict[str, Any] | None:
        """Return a copy of the stored fields at path (ignores vanish_on_read)."""
        fields = self._docs.get(path)
        return copy.deepcopy(fields) if fields is not None else None

    def paths(self, collection_path: str | None = None) -> list[str]:
        """All stored document paths, or only those directly in collection_path."""
        if collection_path is None:
            return sorted(self._docs)
        return sorted(p for p in self._docs if _parent(p) == collection_path)

    def calls_for(self, operation: str) -> list[StoreCall]:
        return [call for call in self.calls if call.operation == operation]

    def reset_calls(self) -> None:
        self.calls.clear()
