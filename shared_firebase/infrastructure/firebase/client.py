"""Firestore client factory (REST-based, no firebase-admin).

Builds a FirestoreRESTClient from FIREBASE_SERVICE_ACCOUNT_KEY (JSON string)
or FIREBASE_SERVICE_ACCOUNT_PATH (file path). No module-level client is kept:
callers own the returned client and close it with aclose().
"""

import json
import logging
from pathlib import Path

import httpx

from shared_firebase.core.config import Settings
from shared_firebase.domain.exceptions import FirestoreNotConfiguredException
from shared_firebase.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
)

logger = logging.getLogger(__name__)


def load_service_account_info(settings: Settings) -> dict | None:
    """Return service account dict from env key or file path, or None if neither is set."""
    key_json = (
        settings.firebase_service_account_key.get_secret_value()
        if settings.firebase_service_account_key
        else None
    )
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            raise FirestoreNotConfiguredException(
                f"FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: {path} "
                f"(resolved: {resolved})"
            )
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


def create_firestore_client(
    settings: Settings,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> FirestoreRESTClient:
    """Create a Firestore REST client from settings.

    Raises:
        FirestoreNotConfiguredException: If no service account is configured.
        ValueError: If the key is not valid JSON or lacks project_id.
    """
    key_dict = load_service_account_info(settings)
    if not key_dict:
        raise FirestoreNotConfiguredException()
    project_id = key_dict.get("project_id")
    if not project_id:
        raise ValueError("Firebase service account JSON missing 'project_id'")

    client = FirestoreRESTClient(
        project_id,
        _get_credentials(key_dict),
        database=settings.firestore_database,
        http_client=http_client,
        timeout=settings.firestore_http_timeout_seconds,
    )
    logger.info(
        "Firestore client created: project=%s, database=%s",
        project_id,
        settings.firestore_database,
    )
    return client
