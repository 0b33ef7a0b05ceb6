"""Tests for InMemoryDocumentStore paging, batch atomicity and failure injection."""

import pytest

from shared_firebase.domain.exceptions import ValidationException, WriteFailureException
from shared_firebase.infrastructure.memory import InMemoryDocumentStore, StoreCall


@pytest.mark.asyncio
async def test_read_returns_copy_and_none_when_missing() -> None:
    store = InMemoryDocumentStore({"clubs/c1": {"tags": ["a"]}})

    doc = await store.read("clubs/c1")
    assert doc is not None
    assert doc.id == "c1"
    doc.fields["tags"].append("mutated")

    assert store.get("clubs/c1") == {"tags": ["a"]}
    assert await store.read("clubs/c2") is None


@pytest.mark.asyncio
async def test_list_page_is_shallow_and_ordered_by_id() -> None:
    store = InMemoryDocumentStore(
        {
            "clubs/b": {},
            "clubs/a": {},
            "clubs/a/roles/r1": {},
            "clubsArchive/z": {},
        }
    )

    page = await store.list_page("clubs", 10)

    assert page.paths == ["clubs/a", "clubs/b"]
    assert page.has_more is False


@pytest.mark.asyncio
async def test_list_page_cursor_and_has_more() -> None:
    store = InMemoryDocumentStore({f"clubs/d{i}": {} for i in range(5)})

    first = await store.list_page("clubs", 2)
    second = await store.list_page("clubs", 2, start_after=first.documents[-1].id)
    third = await store.list_page("clubs", 2, start_after=second.documents[-1].id)

    assert first.paths == ["clubs/d0", "clubs/d1"]
    assert first.has_more is True
    assert second.paths == ["clubs/d2", "clubs/d3"]
    assert third.paths == ["clubs/d4"]
    assert third.has_more is False


@pytest.mark.asyncio
async def test_delete_batch_is_all_or_nothing() -> None:
    """An injected failure on any path leaves every document of the batch in place."""
    store = InMemoryDocumentStore(
        {"clubs/c1": {}, "clubs/c1/roles/r1": {}},
        fail_deletes_in={"clubs/c1/roles"},
    )

    with pytest.raises(WriteFailureException):
        await store.delete_batch(["clubs/c1", "clubs/c1/roles/r1"])

    assert store.paths() == ["clubs/c1", "clubs/c1/roles/r1"]


@pytest.mark.asyncio
async def test_delete_batch_limits_and_empty_batch() -> None:
    store = InMemoryDocumentStore()
    await store.delete_batch([])
    assert store.calls == []

    with pytest.raises(ValidationException):
        await store.delete_batch([f"clubs/d{i}" for i in range(501)])


@pytest.mark.asyncio
async def test_calls_are_recorded_in_order() -> None:
    store = InMemoryDocumentStore({"clubs/c1": {"a": 1}})

    await store.read("clubs/c1")
    await store.write("clubs/c2", {"a": 1})
    await store.list_page("clubs", 5)
    await store.delete_batch(["clubs/c1", "clubs/c2"])

    assert store.calls == [
        StoreCall("read", "clubs/c1"),
        StoreCall("write", "clubs/c2", 1),
        StoreCall("list_page", "clubs", 5),
        StoreCall("delete_batch", "clubs/c1", 2),
    ]
