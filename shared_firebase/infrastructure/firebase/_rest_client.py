"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
Paths passed in and returned are relative to the database's documents root
("clubs/abc/roles/r1"); full resource names stay inside this module.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Sequence
from typing import Any
from urllib.parse import quote

import httpx

from shared_firebase.infrastructure.firebase._rest_encoding import (
    decode_fields,
    encode_document,
)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
) -> Any:
    """Perform async HTTP request to Firestore REST API.

    A 404 on GET returns None (document does not exist). Any other non-2xx
    status, including a 404 on PATCH or POST, raises httpx.HTTPStatusError.
    """
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    if method == "GET":
        resp = await client.get(url, headers=headers)
    elif method == "PATCH":
        resp = await client.patch(url, headers=headers, json=body)
    elif method == "POST":
        resp = await client.post(url, headers=headers, json=body)
    else:
        raise ValueError(f"Unsupported method: {method!r}")
    if resp.status_code == 404 and method == "GET":
        return None
    if resp.status_code not in (200, 204):
        resp.raise_for_status()
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


class DocumentSnapshot:
    """Snapshot of a document (relative path + decoded data)."""

    def __init__(self, path: str, data: dict):
        self.path = path
        self.id = path.rsplit("/", 1)[-1]
        self._data = data

    def to_dict(self) -> dict:
        return self._data


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self.path = path

    async def set(self, data: dict[str, Any]) -> None:
        """Create or overwrite the document (PATCH without update mask replaces all fields)."""
        await _request_async(
            self._client._http,
            self._client.url_for(self.path),
            method="PATCH",
            body=encode_document(data),
            access_token=await self._client.get_token(),
        )

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        out = await _request_async(
            self._client._http,
            self._client.url_for(self.path),
            access_token=await self._client.get_token(),
        )
        if out is None:
            return None
        return DocumentSnapshot(self.path, decode_fields(out.get("fields")))


class _Query:
    """Collection query ordered by document name; runs via runQuery on the parent."""

    def __init__(self, client: FirestoreRESTClient, collection_path: str):
        self._client = client
        self._collection_path = collection_path
        self._limit: int | None = None
        self._start_after: str | None = None

    def limit(self, n: int) -> _Query:
        self._limit = n
        return self

    def start_after(self, document_id: str | None) -> _Query:
        self._start_after = document_id
        return self

    def _structured_query(self) -> dict[str, Any]:
        collection_id = self._collection_path.rsplit("/", 1)[-1]
        structured: dict[str, Any] = {
            "from": [{"collectionId": collection_id}],
            "orderBy": [
                {"field": {"fieldPath": "__name__"}, "direction": "ASCENDING"}
            ],
        }
        if self._start_after is not None:
            cursor = self._client.resource_name(
                f"{self._collection_path}/{self._start_after}"
            )
            structured["startAt"] = {
                "values": [{"referenceValue": cursor}],
                "before": False,
            }
        if self._limit:
            structured["limit"] = self._limit
        return structured

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query and yield document snapshots."""
        parent, _, _ = self._collection_path.rpartition("/")
        url = f"{self._client.url_for(parent)}:runQuery"
        resp = await _request_async(
            self._client._http,
            url,
            method="POST",
            body={"structuredQuery": self._structured_query()},
            access_token=await self._client.get_token(),
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            # Empty results come back as a single item with only readTime.
            if "document" not in item:
                continue
            doc = item["document"]
            yield DocumentSnapshot(
                self._client.relative_path(doc.get("name", "")),
                decode_fields(doc.get("fields")),
            )


class CollectionReference:
    """Reference to a collection; matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self.path = path.strip("/")

    def limit(self, n: int) -> _Query:
        return _Query(self._client, self.path).limit(n)


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        database: str = "(default)",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._prefix = f"projects/{project_id}/databases/{database}/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    @property
    def project_id(self) -> str:
        return self._project_id

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def resource_name(self, path: str) -> str:
        return f"{self._prefix}/{path}" if path else self._prefix

    def relative_path(self, name: str) -> str:
        """Strip the database prefix from a full resource name."""
        return name.removeprefix(f"{self._prefix}/")

    def url_for(self, path: str) -> str:
        """REST URL for a relative document/collection path ("" is the documents root)."""
        base = f"{_BASE}/{self._prefix}"
        return f"{base}/{quote(path, safe='/')}" if path else base

    def collection(self, path: str) -> CollectionReference:
        return CollectionReference(self, path)

    def document(self, path: str) -> DocumentReference:
        return DocumentReference(self, path)

    async def commit_deletes(self, paths: Sequence[str]) -> None:
        """Delete all paths in one atomic commit (all writes apply or none do)."""
        if not paths:
            return
        await _request_async(
            self._http,
            f"{self.url_for('')}:commit",
            method="POST",
            body={"writes": [{"delete": self.resource_name(p)} for p in paths]},
            access_token=await self.get_token(),
        )
