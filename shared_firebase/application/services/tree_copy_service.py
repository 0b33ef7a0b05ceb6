"""Tree replication: copy documents and one level of named subcollections.

Copies are full overwrites, so re-running a copy after a failure or a
cancellation converges to the same destination state. Nothing is rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from shared_firebase.application.dtos.document import TreeOperationResult
from shared_firebase.application.interfaces.document_store import IDocumentStore
from shared_firebase.core.constants import DEFAULT_PAGE_SIZE
from shared_firebase.domain.exceptions import SharedFirebaseException
from shared_firebase.shared.telemetry.tracing import add_span_attributes, traced
from shared_firebase.shared.utils.paths import (
    child_path,
    validate_collection_path,
    validate_document_path,
    validate_page_size,
    validate_subcollection_names,
)

logger = logging.getLogger(__name__)


class TreeCopyService:
    """Copies a document (plus named subcollections) or a whole collection to another location.

    Documents are processed one at a time; each remote call is awaited before
    the next is issued.
    """

    def __init__(
        self, store: IDocumentStore, default_page_size: int = DEFAULT_PAGE_SIZE
    ) -> None:
        self._store = store
        self._default_page_size = validate_page_size(default_page_size)

    def _page_size(self, page_size: int | None) -> int:
        return validate_page_size(self._default_page_size if page_size is None else page_size)

    @traced("tree.copy_document")
    async def copy_document(
        self,
        source_path: str,
        dest_path: str,
        subcollections: Sequence[str] = (),
        page_size: int | None = None,
    ) -> int:
        """Copy one document and each named subcollection (one level) to dest_path.

        A source document with no data is skipped: nothing is written to the
        destination, not even its subcollections.

        Args:
            source_path: Document to copy.
            dest_path: Document to overwrite.
            subcollections: Names of subcollections under the document to copy.
            page_size: Page size used to walk each subcollection.

        Returns:
            Number of documents written.

        Raises:
            WriteFailureException: A write or list failed; remaining copies are skipped.
        """
        validate_document_path(source_path, "source_path")
        validate_document_path(dest_path, "dest_path")
        names = validate_subcollection_names(subcollections)
        size = self._page_size(page_size)
        try:
            written = await self._copy_document(source_path, dest_path, names, size)
        except SharedFirebaseException as e:
            logger.warning("Copy %s -> %s aborted: %s", source_path, dest_path, e.message)
            raise
        add_span_attributes(documents_written=written)
        return written

    @traced("tree.copy_collection")
    async def copy_collection(
        self,
        source_collection: str,
        dest_collection: str,
        subcollections: Sequence[str] = (),
        page_size: int | None = None,
    ) -> TreeOperationResult:
        """Copy every document of source_collection (with named subcollections) into dest_collection.

        Document ids are preserved. The source is walked page by page in id
        order; documents already copied stay copied if a later one fails.

        Returns:
            TreeOperationResult with documents written and pages fetched.
        """
        validate_collection_path(source_collection, "source_collection")
        validate_collection_path(dest_collection, "dest_collection")
        names = validate_subcollection_names(subcollections)
        size = self._page_size(page_size)
        logger.info(
            "Copying collection %s -> %s (subcollections=%s, page_size=%s)",
            source_collection,
            dest_collection,
            list(names),
            size,
        )
        try:
            result = await self._copy_collection(
                source_collection, dest_collection, names, size
            )
        except SharedFirebaseException as e:
            logger.warning(
                "Copy of collection %s -> %s aborted: %s",
                source_collection,
                dest_collection,
                e.message,
            )
            raise
        logger.info(
            "Copied %s document(s) from %s to %s in %s page(s)",
            result.documents,
            source_collection,
            dest_collection,
            result.pages_fetched,
        )
        add_span_attributes(
            documents_written=result.documents, pages_fetched=result.pages_fetched
        )
        return result

    async def _copy_document(
        self,
        source_path: str,
        dest_path: str,
        subcollections: tuple[str, ...],
        page_size: int,
    ) -> int:
        source = await self._store.read(source_path)
        if source is None:
            logger.debug("Source document %s has no data; skipped", source_path)
            return 0
        await self._store.write(dest_path, source.fields)
        written = 1
        for name in subcollections:
            sub = await self._copy_collection(
                child_path(source_path, name), child_path(dest_path, name), (), page_size
            )
            written += sub.documents
        return written

    async def _copy_collection(
        self,
        source_collection: str,
        dest_collection: str,
        subcollections: tuple[str, ...],
        page_size: int,
    ) -> TreeOperationResult:
        written = 0
        pages = 0
        cursor: str | None = None
        while True:
            page = await self._store.list_page(
                source_collection,
                page_size,
                server_authoritative=False,
                start_after=cursor,
            )
            pages += 1
            for doc in page.documents:
                written += await self._copy_document(
                    doc.path,
                    child_path(dest_collection, doc.id),
                    subcollections,
                    page_size,
                )
            if not page.has_more:
                break
            cursor = page.documents[-1].id
        return TreeOperationResult(documents=written, pages_fetched=pages)
