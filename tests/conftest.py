"""Pytest configuration and fixtures for shared_firebase.

Engine tests run against InMemoryDocumentStore; REST tests use
httpx.MockTransport. Tests that need a real Firestore project are marked
requires_firestore and skip when no credentials are configured.
"""

import pytest

from shared_firebase.application.services import TreeCopyService, TreeDeleteService
from shared_firebase.core.config import Settings, get_settings
from shared_firebase.infrastructure.memory import InMemoryDocumentStore


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None)


def club_tree() -> dict[str, dict]:
    """Two clubs with roles/members subcollections plus an unrelated root."""
    return {
        "fakeClubs/c1": {"name": "Chess", "founded": 1999, "active": True},
        "fakeClubs/c1/roles/admin": {"label": "Admin", "rank": 1},
        "fakeClubs/c1/roles/member": {"label": "Member", "rank": 2},
        "fakeClubs/c1/members/u1": {"role": "admin"},
        "fakeClubs/c2": {"name": "Go", "founded": 2005, "active": False},
        "fakeClubs/c2/roles/admin": {"label": "Admin", "rank": 1},
        "prodClubs/real": {"name": "Real"},
        "prodClubs/real/roles/admin": {"label": "Admin", "rank": 1},
    }


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(club_tree())


@pytest.fixture
def copier(store: InMemoryDocumentStore) -> TreeCopyService:
    return TreeCopyService(store)


@pytest.fixture
def deleter(store: InMemoryDocumentStore) -> TreeDeleteService:
    return TreeDeleteService(store)
