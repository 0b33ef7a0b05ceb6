"""DTOs for documents, pages and operation results (no dependency on a backend)."""

from dataclasses import dataclass, field
from typing import Any

from shared_firebase.core.constants import PATH_SEP


@dataclass(frozen=True)
class StoredDocument:
    """One document as read from the store: its full path and field mapping."""

    path: str
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.path.rsplit(PATH_SEP, 1)[-1]


@dataclass(frozen=True)
class DocumentPage:
    """One bounded fetch from a collection.

    has_more is True when the page came back full, i.e. more documents may
    remain. Callers that delete as they go re-query for a fresh page and
    stop after an empty or short page (has_more is False).
    """

    documents: list[StoredDocument]
    has_more: bool

    @property
    def paths(self) -> list[str]:
        return [doc.path for doc in self.documents]

    def __len__(self) -> int:
        return len(self.documents)


@dataclass(frozen=True)
class TreeOperationResult:
    """Counts reported by a collection-wide copy or delete."""

    documents: int = 0
    pages_fetched: int = 0
    batches_committed: int = 0
