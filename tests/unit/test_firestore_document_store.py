"""Firestore REST document store against a mocked HTTP transport."""

import json
from datetime import UTC, datetime

import httpx
import pytest

from app.infrastructure.exceptions import DocumentNotFoundError, DocumentStoreError
from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from app.infrastructure.firebase._rest_encoding import decode_document, encode_document
from app.infrastructure.firebase.document_store import FirestoreDocumentStore

PREFIX = "/v1/projects/demo/databases/(default)/documents"


class FakeCredentials:
    valid = True
    token = "svc-token"


def _store(handler) -> FirestoreDocumentStore:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FirestoreDocumentStore(FirestoreRESTClient("demo", FakeCredentials(), http_client=http))


def test_encoding_round_trips_nested_values() -> None:
    data = {
        "title": "Harbour",
        "count": 3,
        "ratio": 0.5,
        "public": False,
        "missing": None,
        "createdAt": datetime(2024, 5, 1, 12, 30, tzinfo=UTC),
        "tags": ["a", 1],
        "meta": {"admin": True},
    }
    doc = encode_document(data)
    assert doc["fields"]["count"] == {"integerValue": "3"}
    assert doc["fields"]["public"] == {"booleanValue": False}
    assert decode_document(doc) == data


def test_decode_nanosecond_timestamp() -> None:
    decoded = decode_document(
        {"fields": {"t": {"timestampValue": "2024-05-01T12:30:00.123456789Z"}}}
    )
    assert decoded["t"] == datetime(2024, 5, 1, 12, 30, 0, 123456, tzinfo=UTC)


def test_encode_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        encode_document({"bad": object()})


async def test_get_document_decodes_fields_and_sends_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == f"{PREFIX}/users/u1"
        assert request.headers["Authorization"] == "Bearer svc-token"
        return httpx.Response(
            200,
            json={
                "name": "projects/demo/databases/(default)/documents/users/u1",
                "fields": {"firstName": {"stringValue": "Ada"}},
            },
        )

    doc = await _store(handler).get_document("users/u1")
    assert doc is not None
    assert doc.id == "u1"
    assert doc.path == "users/u1"
    assert doc.data == {"firstName": "Ada"}


async def test_get_missing_document_returns_none() -> None:
    store = _store(lambda request: httpx.Response(404, json={"error": {"status": "NOT_FOUND"}}))
    assert await store.get_document("users/ghost") is None


async def test_update_sends_field_mask_and_requires_existence() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(404)

    with pytest.raises(DocumentNotFoundError):
        await _store(handler).update_document("users/u1", {"profileUrl": "x", "odd-key": 1})

    params = seen[0].url.params
    assert seen[0].method == "PATCH"
    assert params.get_list("updateMask.fieldPaths") == ["profileUrl", "`odd-key`"]
    assert params["currentDocument.exists"] == "true"


async def test_list_documents_follows_page_tokens() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        page = request.url.params.get("pageToken")
        name = f"projects/demo/databases/(default)/documents/projects/u1/project/{'b' if page else 'a'}"
        body = {"documents": [{"name": name, "fields": {"title": {"stringValue": name[-1]}}}]}
        if not page:
            body["nextPageToken"] = "next"
        return httpx.Response(200, json=body)

    docs = await _store(handler).list_documents("projects/u1/project")
    assert [(d.id, d.path, d.data["title"]) for d in docs] == [
        ("a", "projects/u1/project/a", "a"),
        ("b", "projects/u1/project/b", "b"),
    ]


async def test_list_subcollections_posts_list_collection_ids() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == f"{PREFIX}/projects/u1:listCollectionIds"
        assert json.loads(request.content)["pageSize"] == 300
        return httpx.Response(200, json={"collectionIds": ["project", "archive"]})

    assert await _store(handler).list_subcollections("projects/u1") == ["archive", "project"]


async def test_list_subcollections_of_missing_parent_is_empty() -> None:
    store = _store(lambda request: httpx.Response(200, json={}))
    assert await store.list_subcollections("projects/u1") == []


async def test_add_document_returns_server_id() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == f"{PREFIX}/users"
        return httpx.Response(200, json={"name": f"{PREFIX}/users/generated"})

    assert await _store(handler).add_document("users", {"a": 1}) == "generated"


async def test_server_error_becomes_document_store_error() -> None:
    store = _store(lambda request: httpx.Response(503, json={"error": {"message": "unavailable"}}))
    with pytest.raises(DocumentStoreError) as exc_info:
        await store.set_document("users/u1", {"a": 1})
    assert exc_info.value.error_code == "DOCUMENT_STORE_ERROR"


async def test_paths_are_validated() -> None:
    store = _store(lambda request: httpx.Response(200, json={}))
    with pytest.raises(ValueError):
        await store.get_document("users")
    with pytest.raises(ValueError):
        await store.list_documents("users/u1")
