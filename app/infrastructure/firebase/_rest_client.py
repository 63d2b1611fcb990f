"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
References mirror the Admin SDK shape (collection(...).document(...)) and
support arbitrarily nested sub-collections.
"""

from __future__ import annotations

import asyncio
import json
import re
from collections.abc import AsyncIterator
from typing import Any

import httpx

from app.infrastructure.exceptions import (
    DocumentExistsError,
    DocumentNotFoundError,
    DocumentStoreError,
)
from app.infrastructure.firebase._rest_encoding import decode_document, encode_document

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"
_PAGE_SIZE = 300
_SIMPLE_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z_0-9]*$")


def _get_credentials(key_dict: dict, scopes: list[str] | None = None):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=scopes or [_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


def _field_path(name: str) -> str:
    """Quote a field name for updateMask unless it is a simple identifier."""
    if _SIMPLE_FIELD_RE.match(name):
        return name
    return "`" + name.replace("\\", "\\\\").replace("`", "\\`") + "`"


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
    params: list[tuple[str, str]] | None = None,
) -> dict | list | None:
    """Perform async HTTP request to Firestore REST API. 404 returns None."""
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    if method not in ("GET", "PATCH", "POST", "DELETE"):
        raise ValueError(f"Unsupported method: {method!r}")
    try:
        resp = await client.request(
            method, url, headers=headers, json=body, params=params
        )
        if resp.status_code == 404:
            return None
        if resp.status_code == 409:
            raise DocumentExistsError(url)
        if resp.status_code not in (200, 204):
            resp.raise_for_status()
    except httpx.HTTPError as e:
        raise DocumentStoreError(url, str(e)) from e
    if method == "DELETE":
        return {}
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


class DocumentSnapshot:
    """Snapshot of a document (id + data)."""

    def __init__(self, id_: str, data: dict, path: str = ""):
        self.id = id_
        self.path = path
        self._data = data

    def to_dict(self) -> dict:
        return self._data


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return self._path.split("/")[-1]

    @property
    def relative_path(self) -> str:
        return self._path[len(self._client.prefix) + 1:]

    def collection(self, collection_id: str) -> "CollectionReference":
        return CollectionReference(self._client, f"{self._path}/{collection_id}")

    async def set(self, data: dict[str, Any]) -> None:
        """Create or overwrite the document (PATCH with full replace)."""
        await _request_async(
            self._client.http,
            f"{_BASE}/{self._path}",
            method="PATCH",
            body=encode_document(data),
            access_token=await self._client.get_token(),
        )

    async def update(self, data: dict[str, Any]) -> None:
        """Merge fields into an existing document; DocumentNotFoundError if missing."""
        params = [("updateMask.fieldPaths", _field_path(k)) for k in data]
        params.append(("currentDocument.exists", "true"))
        out = await _request_async(
            self._client.http,
            f"{_BASE}/{self._path}",
            method="PATCH",
            body=encode_document(data),
            access_token=await self._client.get_token(),
            params=params,
        )
        if out is None:
            raise DocumentNotFoundError(self.relative_path)

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        out = await _request_async(
            self._client.http,
            f"{_BASE}/{self._path}",
            access_token=await self._client.get_token(),
        )
        if not out:
            return None
        return DocumentSnapshot(self.id, decode_document(out), self.relative_path)

    async def delete(self) -> None:
        """Delete the document. Idempotent if document is already missing (404)."""
        await _request_async(
            self._client.http,
            f"{_BASE}/{self._path}",
            method="DELETE",
            access_token=await self._client.get_token(),
        )

    async def list_collection_ids(self) -> list[str]:
        """Return sub-collection ids (works for missing parent documents)."""
        ids: list[str] = []
        page_token: str | None = None
        while True:
            body: dict[str, Any] = {"pageSize": _PAGE_SIZE}
            if page_token:
                body["pageToken"] = page_token
            out = await _request_async(
                self._client.http,
                f"{_BASE}/{self._path}:listCollectionIds",
                method="POST",
                body=body,
                access_token=await self._client.get_token(),
            )
            if not out:
                break
            ids.extend(out.get("collectionIds", []))
            page_token = out.get("nextPageToken")
            if not page_token:
                break
        return ids


class CollectionReference:
    """Reference to a collection; matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path.rstrip("/")

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    async def add(self, data: dict[str, Any]) -> str:
        """Create a document with a server-assigned id; return the id."""
        out = await _request_async(
            self._client.http,
            f"{_BASE}/{self._path}",
            method="POST",
            body=encode_document(data),
            access_token=await self._client.get_token(),
        )
        name = (out or {}).get("name", "")
        if not name:
            raise DocumentStoreError(self._path, "createDocument returned no name")
        return name.split("/")[-1]

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """List documents in the collection (shallow), following page tokens."""
        page_token: str | None = None
        relative = self._path[len(self._client.prefix) + 1:]
        while True:
            params = [("pageSize", str(_PAGE_SIZE))]
            if page_token:
                params.append(("pageToken", page_token))
            out = await _request_async(
                self._client.http,
                f"{_BASE}/{self._path}",
                access_token=await self._client.get_token(),
                params=params,
            )
            if not out:
                return
            for doc in out.get("documents", []):
                name = doc.get("name", "")
                doc_id = name.split("/")[-1] if name else ""
                yield DocumentSnapshot(doc_id, decode_document(doc), f"{relative}/{doc_id}")
            page_token = out.get("nextPageToken")
            if not page_token:
                return


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self.prefix = f"projects/{project_id}/databases/(default)/documents"
        self.http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self.http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def collection(self, collection_path: str) -> CollectionReference:
        return CollectionReference(self, f"{self.prefix}/{collection_path.strip('/')}")

    def document(self, document_path: str) -> DocumentReference:
        return DocumentReference(self, f"{self.prefix}/{document_path.strip('/')}")
