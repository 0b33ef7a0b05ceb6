"""Copy/delete round trip against a real Firestore project.

Requires FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH pointing
at a disposable project. Skips otherwise; run only these via:
pytest -m requires_firestore
"""

import uuid

import pytest

from shared_firebase.core.config import get_settings
from shared_firebase.runtime import open_tree_services


@pytest.fixture
async def services():
    settings = get_settings()
    if not settings.has_firebase_credentials:
        pytest.skip(
            "Firestore not configured: set FIREBASE_SERVICE_ACCOUNT_KEY or "
            "FIREBASE_SERVICE_ACCOUNT_PATH"
        )
    async with open_tree_services(settings, configure_logging=False) as svc:
        yield svc


@pytest.mark.requires_firestore
async def test_copy_then_guarded_delete(services) -> None:
    """Copy a club with roles under a scratch root, then delete both roots."""
    root = f"fakeClubs_it_{uuid.uuid4().hex[:8]}"
    copy_root = f"{root}_copy"
    store = services.store
    await store.write(f"{root}/c1", {"a": 1, "b": "x"})
    await store.write(f"{root}/c1/roles/r1", {"rank": 1})
    await store.write(f"{root}/c1/roles/r2", {"rank": 2})

    try:
        result = await services.copier.copy_collection(root, copy_root, ["roles"])
        assert result.documents == 3
        copied = await store.read(f"{copy_root}/c1")
        assert copied is not None
        assert copied.fields == {"a": 1, "b": "x"}
        roles = await store.list_page(f"{copy_root}/c1/roles", 10)
        assert [d.id for d in roles.documents] == ["r1", "r2"]
    finally:
        for collection in (root, copy_root):
            await services.deleter.delete_collection(
                collection, ["roles"], page_size=1, allowed_prefix="fakeClubs_it_"
            )

    assert (await store.list_page(root, 10)).documents == []
    assert (await store.list_page(f"{root}/c1/roles", 10)).documents == []
