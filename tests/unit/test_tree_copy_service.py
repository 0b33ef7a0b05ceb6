"""Unit tests for TreeCopyService (document copy, collection copy, skip-on-absent, failures)."""

from datetime import UTC, datetime

import pytest

from shared_firebase.application.services import TreeCopyService
from shared_firebase.domain.exceptions import ValidationException, WriteFailureException
from shared_firebase.infrastructure.memory import InMemoryDocumentStore


@pytest.mark.asyncio
async def test_copy_document_copies_fields_and_named_subcollection() -> None:
    """Fields {a:1, b:"x"} and 2 'roles' documents are reproduced field-for-field."""
    store = InMemoryDocumentStore(
        {
            "fakeClubs/src": {"a": 1, "b": "x"},
            "fakeClubs/src/roles/r1": {"label": "Admin", "rank": 1},
            "fakeClubs/src/roles/r2": {"label": "Member", "rank": 2},
        }
    )
    copier = TreeCopyService(store)

    written = await copier.copy_document("fakeClubs/src", "fakeClubs/dst", ["roles"])

    assert written == 3
    assert store.get("fakeClubs/dst") == {"a": 1, "b": "x"}
    assert store.paths("fakeClubs/dst/roles") == [
        "fakeClubs/dst/roles/r1",
        "fakeClubs/dst/roles/r2",
    ]
    assert store.get("fakeClubs/dst/roles/r1") == {"label": "Admin", "rank": 1}
    assert store.get("fakeClubs/dst/roles/r2") == {"label": "Member", "rank": 2}


@pytest.mark.asyncio
async def test_copy_document_overwrites_destination_without_merge() -> None:
    """Destination fields not present at the source are dropped (full overwrite)."""
    store = InMemoryDocumentStore(
        {
            "fakeClubs/src": {"a": 1},
            "fakeClubs/dst": {"a": 0, "stale": True},
        }
    )

    await TreeCopyService(store).copy_document("fakeClubs/src", "fakeClubs/dst")

    assert store.get("fakeClubs/dst") == {"a": 1}


@pytest.mark.asyncio
async def test_copy_document_missing_source_leaves_destination_untouched() -> None:
    """An absent source is skipped: no write and no subcollection walk."""
    store = InMemoryDocumentStore({"fakeClubs/dst": {"keep": "me"}})

    written = await TreeCopyService(store).copy_document(
        "fakeClubs/missing", "fakeClubs/dst", ["roles"]
    )

    assert written == 0
    assert store.get("fakeClubs/dst") == {"keep": "me"}
    assert store.calls_for("write") == []
    assert store.calls_for("list_page") == []


@pytest.mark.asyncio
async def test_copy_document_is_one_level_deep() -> None:
    """Subcollections of subcollection documents are not copied."""
    store = InMemoryDocumentStore(
        {
            "fakeClubs/src": {"a": 1},
            "fakeClubs/src/roles/r1": {"rank": 1},
            "fakeClubs/src/roles/r1/grants/g1": {"scope": "all"},
        }
    )

    await TreeCopyService(store).copy_document(
        "fakeClubs/src", "fakeClubs/dst", ["roles", "grants"]
    )

    assert store.get("fakeClubs/dst/roles/r1") == {"rank": 1}
    assert store.paths("fakeClubs/dst/roles/r1/grants") == []


@pytest.mark.asyncio
async def test_copy_document_preserves_value_types() -> None:
    """Opaque values (timestamps, nested maps, lists, None) are copied as-is."""
    ts = datetime(2025, 9, 8, 12, 30, tzinfo=UTC)
    fields = {"at": ts, "meta": {"tags": ["a", "b"], "n": 2.5}, "note": None}
    store = InMemoryDocumentStore({"fakeClubs/src": fields})

    await TreeCopyService(store).copy_document("fakeClubs/src", "fakeClubs/dst")

    assert store.get("fakeClubs/dst") == fields


@pytest.mark.asyncio
async def test_copy_document_write_failure_aborts_remaining_subcollections() -> None:
    """A failed write propagates; later subcollections are not copied, earlier writes remain."""
    store = InMemoryDocumentStore(
        {
            "fakeClubs/src": {"a": 1},
            "fakeClubs/src/roles/r1": {"rank": 1},
            "fakeClubs/src/members/m1": {"role": "admin"},
        },
        fail_writes_to={"fakeClubs/dst/roles/r1"},
    )

    with pytest.raises(WriteFailureException) as exc_info:
        await TreeCopyService(store).copy_document(
            "fakeClubs/src", "fakeClubs/dst", ["roles", "members"]
        )

    assert exc_info.value.path == "fakeClubs/dst/roles/r1"
    assert store.get("fakeClubs/dst") == {"a": 1}
    assert store.paths("fakeClubs/dst/members") == []


@pytest.mark.asyncio
async def test_copy_collection_copies_every_document_with_subcollections(
    store: InMemoryDocumentStore, copier: TreeCopyService
) -> None:
    """Every document and its named subcollection land under the destination, ids preserved."""
    result = await copier.copy_collection("fakeClubs", "archiveClubs", ["roles"])

    assert result.documents == 5
    assert store.paths("archiveClubs") == ["archiveClubs/c1", "archiveClubs/c2"]
    assert store.get("archiveClubs/c1") == store.get("fakeClubs/c1")
    assert store.paths("archiveClubs/c1/roles") == [
        "archiveClubs/c1/roles/admin",
        "archiveClubs/c1/roles/member",
    ]
    assert store.paths("archiveClubs/c2/roles") == ["archiveClubs/c2/roles/admin"]
    # members was not named
    assert store.paths("archiveClubs/c1/members") == []


@pytest.mark.asyncio
async def test_copy_collection_pages_through_large_source() -> None:
    """The source is walked with a cursor until a short page; all documents are copied."""
    docs = {f"fakeClubs/d{i:03d}": {"n": i} for i in range(23)}
    store = InMemoryDocumentStore(docs)

    result = await TreeCopyService(store).copy_collection(
        "fakeClubs", "copyClubs", page_size=10
    )

    assert result.documents == 23
    assert result.pages_fetched == 3
    assert len(store.paths("copyClubs")) == 23
    assert store.get("copyClubs/d022") == {"n": 22}


@pytest.mark.asyncio
async def test_copy_collection_skips_document_absent_at_read_time() -> None:
    """A listed document that reads as missing is skipped without error; siblings still copy."""
    store = InMemoryDocumentStore(
        {
            "fakeClubs/c1": {"name": "one"},
            "fakeClubs/c2": {"name": "two"},
            "fakeClubs/c3": {"name": "three"},
        },
        vanish_on_read={"fakeClubs/c2"},
    )

    result = await TreeCopyService(store).copy_collection("fakeClubs", "copyClubs")

    assert result.documents == 2
    assert store.get("copyClubs/c1") == {"name": "one"}
    assert store.get("copyClubs/c2") is None
    assert store.get("copyClubs/c3") == {"name": "three"}


@pytest.mark.asyncio
async def test_copy_collection_aborts_on_first_failure() -> None:
    """Documents copied before the failure stay copied; later ones are not attempted."""
    store = InMemoryDocumentStore(
        {
            "fakeClubs/c1": {"name": "one"},
            "fakeClubs/c2": {"name": "two"},
            "fakeClubs/c3": {"name": "three"},
        },
        fail_writes_to={"copyClubs/c2"},
    )

    with pytest.raises(WriteFailureException):
        await TreeCopyService(store).copy_collection("fakeClubs", "copyClubs")

    assert store.paths("copyClubs") == ["copyClubs/c1"]
    assert "fakeClubs/c3" not in [c.path for c in store.calls_for("read")]


@pytest.mark.asyncio
async def test_copy_collection_is_idempotent(
    store: InMemoryDocumentStore, copier: TreeCopyService
) -> None:
    """Running the same copy twice converges to the same destination state."""
    await copier.copy_collection("fakeClubs", "archiveClubs", ["roles", "members"])
    first = {p: store.get(p) for p in store.paths() if p.startswith("archiveClubs")}

    await copier.copy_collection("fakeClubs", "archiveClubs", ["roles", "members"])
    second = {p: store.get(p) for p in store.paths() if p.startswith("archiveClubs")}

    assert first == second
    assert len(first) == 6


@pytest.mark.asyncio
async def test_copy_rejects_string_subcollections(copier: TreeCopyService) -> None:
    """A bare string is not a list of names."""
    with pytest.raises(ValidationException) as exc_info:
        await copier.copy_document("fakeClubs/c1", "fakeClubs/c9", "roles")
    assert exc_info.value.details == {"field": "subcollections"}


@pytest.mark.asyncio
async def test_copy_document_rejects_collection_path(copier: TreeCopyService) -> None:
    with pytest.raises(ValidationException):
        await copier.copy_document("fakeClubs", "fakeClubs/c9")
