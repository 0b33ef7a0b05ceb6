"""Guarded recursive deletion: paged subcollection wipes, then the parent document.

Deletion order is always children before parent. Every page is fetched
from the server and deleted as one atomic batch, so peak batch size is
bounded by page_size and an interrupted delete can simply be re-run: the
documents that remain are returned by the next fresh page.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from shared_firebase.application.dtos.document import TreeOperationResult
from shared_firebase.application.interfaces.document_store import IDocumentStore
from shared_firebase.core.constants import DEFAULT_PAGE_SIZE
from shared_firebase.domain.exceptions import (
    GuardViolationException,
    SharedFirebaseException,
)
from shared_firebase.shared.telemetry.tracing import add_span_attributes, traced
from shared_firebase.shared.utils.paths import (
    check_allowed_prefix,
    child_path,
    validate_collection_path,
    validate_document_path,
    validate_page_size,
    validate_subcollection_names,
)

logger = logging.getLogger(__name__)


@dataclass
class _DeleteTally:
    documents: int = 0
    pages_fetched: int = 0
    batches_committed: int = 0

    def result(self) -> TreeOperationResult:
        return TreeOperationResult(
            documents=self.documents,
            pages_fetched=self.pages_fetched,
            batches_committed=self.batches_committed,
        )


class TreeDeleteService:
    """Deletes documents, their named subcollections, and whole collections.

    delete_collection is the entry point for bulk destructive operations and
    refuses to touch any collection outside the caller's allowed prefix.
    """

    def __init__(
        self, store: IDocumentStore, default_page_size: int = DEFAULT_PAGE_SIZE
    ) -> None:
        self._store = store
        self._default_page_size = validate_page_size(default_page_size)

    def _page_size(self, page_size: int | None) -> int:
        return validate_page_size(self._default_page_size if page_size is None else page_size)

    @traced("tree.wipe_page")
    async def wipe_page(self, collection_path: str, page_size: int | None = None) -> bool:
        """Delete one page of documents from collection_path.

        Fetches up to page_size documents from the server and deletes all of
        them in one atomic batch. Loop until it returns False to empty the
        collection.

        Returns:
            True if a page was deleted, False if the collection was empty
            (no delete issued).
        """
        validate_collection_path(collection_path)
        size = self._page_size(page_size)
        return await self._wipe_page(collection_path, size, _DeleteTally()) > 0

    @traced("tree.delete_document")
    async def delete_document(
        self,
        path: str,
        subcollections: Sequence[str] = (),
        page_size: int | None = None,
        *,
        allowed_prefix: str | None = None,
    ) -> int:
        """Wipe each named subcollection of path, in order, then delete path itself.

        If a subcollection wipe fails, the document and any later-listed
        subcollections are left untouched and the error propagates.

        Args:
            path: Document to delete.
            subcollections: Names of subcollections to wipe first.
            page_size: Documents per fetch and per atomic delete.
            allowed_prefix: When given, the document's collection must start
                with it (checked before any I/O).

        Returns:
            Number of documents deleted, including the document itself.
        """
        if allowed_prefix is not None:
            self._check_guard(path.rpartition("/")[0], allowed_prefix)
        validate_document_path(path)
        names = validate_subcollection_names(subcollections)
        size = self._page_size(page_size)
        tally = _DeleteTally()
        try:
            await self._delete_document(path, names, size, tally)
        except SharedFirebaseException as e:
            logger.warning(
                "Delete of %s aborted after %s document(s): %s",
                path,
                tally.documents,
                e.message,
            )
            raise
        add_span_attributes(documents_deleted=tally.documents)
        return tally.documents

    @traced("tree.delete_collection")
    async def delete_collection(
        self,
        collection_path: str,
        subcollections: Sequence[str] = (),
        page_size: int | None = None,
        *,
        allowed_prefix: str,
    ) -> TreeOperationResult:
        """Delete every document of collection_path together with its named subcollections.

        The guard is checked before any read or write. Parents are paged
        from the server; each document on a page is deleted with
        delete_document semantics (subcollections first). Processing stops
        at the first failure.

        Args:
            collection_path: Collection to empty.
            subcollections: Subcollection names wiped under every document.
            page_size: Documents per fetch and per atomic delete.
            allowed_prefix: collection_path must start with this prefix.

        Returns:
            TreeOperationResult with documents deleted, pages fetched and
            batches committed (subcollection pages included).

        Raises:
            GuardViolationException: collection_path is outside allowed_prefix.
            WriteFailureException: A list or delete failed.
        """
        self._check_guard(collection_path, allowed_prefix)
        validate_collection_path(collection_path)
        names = validate_subcollection_names(subcollections)
        size = self._page_size(page_size)
        logger.info(
            "Deleting collection %s (subcollections=%s, page_size=%s)",
            collection_path,
            list(names),
            size,
        )
        tally = _DeleteTally()
        try:
            while True:
                page = await self._store.list_page(
                    collection_path, size, server_authoritative=True
                )
                tally.pages_fetched += 1
                logger.debug(
                    "Fetched %s parent document(s) from %s", len(page), collection_path
                )
                for doc in page.documents:
                    await self._delete_document(doc.path, names, size, tally)
                if not page.has_more:
                    break
        except SharedFirebaseException as e:
            logger.warning(
                "Delete of collection %s aborted after %s document(s): %s",
                collection_path,
                tally.documents,
                e.message,
            )
            raise
        result = tally.result()
        logger.info(
            "Deleted %s document(s) from %s (%s page(s), %s batch(es))",
            result.documents,
            collection_path,
            result.pages_fetched,
            result.batches_committed,
        )
        add_span_attributes(
            documents_deleted=result.documents,
            pages_fetched=result.pages_fetched,
            batches_committed=result.batches_committed,
        )
        return result

    def _check_guard(self, collection_path: str, allowed_prefix: str) -> None:
        try:
            check_allowed_prefix(collection_path, allowed_prefix)
        except GuardViolationException:
            logger.warning(
                "Refusing to delete %s: outside allowed prefix %r",
                collection_path,
                allowed_prefix,
            )
            raise

    async def _wipe_page(
        self, collection_path: str, page_size: int, tally: _DeleteTally
    ) -> int:
        page = await self._store.list_page(
            collection_path, page_size, server_authoritative=True
        )
        tally.pages_fetched += 1
        if not page.documents:
            return 0
        await self._store.delete_batch(page.paths)
        tally.batches_committed += 1
        tally.documents += len(page)
        logger.debug("Deleted %s document(s) from %s", len(page), collection_path)
        return len(page)

    async def _delete_document(
        self,
        path: str,
        subcollections: tuple[str, ...],
        page_size: int,
        tally: _DeleteTally,
    ) -> None:
        for name in subcollections:
            sub_path = child_path(path, name)
            # A short page means the subcollection was exhausted at read time.
            while await self._wipe_page(sub_path, page_size, tally) == page_size:
                pass
        await self._store.delete_batch([path])
        tally.batches_committed += 1
        tally.documents += 1
