"""Signed downloads served by the gateway for the local blob store."""

from datetime import UTC, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from app.infrastructure.external.storage.local_storage import LocalStorageService
from app.infrastructure.security.jwt import create_access_token, create_download_token
from app.main import create_app


@pytest.fixture
def storage(tmp_path) -> LocalStorageService:
    return LocalStorageService(str(tmp_path / "blobs"))


@pytest.fixture
async def local_client(storage: LocalStorageService, documents, identity_provider):
    app = create_app(
        document_store=documents, blob_store=storage, identity_provider=identity_provider
    )
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def test_signed_url_downloads_object(
    local_client: AsyncClient, storage: LocalStorageService
) -> None:
    ref = await storage.put_object("images/u1/a.jpg", b"jpeg-bytes", "image/jpeg")
    url = await storage.get_signed_url(ref, datetime.now(UTC) + timedelta(hours=1))
    assert url.startswith("/storage/download/")

    response = await local_client.get(url)
    assert response.status_code == 200
    assert response.content == b"jpeg-bytes"
    assert response.headers["content-type"] == "image/jpeg"


async def test_expired_or_foreign_token_is_not_found(local_client: AsyncClient) -> None:
    expired = create_download_token("images/u1/a.jpg", datetime.now(UTC) - timedelta(seconds=5))
    id_token = create_access_token({"sub": "images/u1/a.jpg"})
    for token in (expired, id_token, "garbage"):
        response = await local_client.get(f"/storage/download/{token}")
        assert response.status_code == 404
        assert response.json() == {"message": "File not found"}


async def test_token_for_deleted_object_is_not_found(
    local_client: AsyncClient, storage: LocalStorageService
) -> None:
    await storage.put_object("images/u1/a.jpg", b"x", "image/jpeg")
    url = await storage.get_signed_url("images/u1/a.jpg", datetime.now(UTC) + timedelta(hours=1))
    await storage.delete_object("images/u1/a.jpg")
    response = await local_client.get(url)
    assert response.status_code == 404


async def test_project_upload_urls_resolve_through_gateway(
    local_client: AsyncClient, create_account_for
) -> None:
    uid, headers = await create_account_for(local_client)
    upload = await local_client.post(
        "/upload",
        headers=headers,
        data={"title": "Local"},
        files=[("images", ("a.png", b"png-bytes", "image/png"))],
    )
    project_id = upload.json()["projectId"]
    project = await local_client.get(f"/api/projects/images/{project_id}/{uid}", headers=headers)
    image_url = project.json()["images"][0]["imageUrl"]
    download = await local_client.get(image_url)
    assert download.content == b"png-bytes"
