"""S3StorageService with a mocked boto3 client, plus offline presigning."""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest
from botocore.exceptions import ClientError

from app.domain.value_objects.access_policy import AccessPolicy
from app.infrastructure.exceptions import (
    StorageNotFoundError,
    StoragePolicyError,
    StorageUploadError,
)
from app.infrastructure.external.storage.policies import encode_policy
from app.infrastructure.external.storage.s3_storage import (
    SIGV4_MAX_EXPIRY_SECONDS,
    S3StorageService,
)


def _client_error(code: str, operation: str = "HeadObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def storage(client: MagicMock) -> S3StorageService:
    return S3StorageService("bucket", client=client)


async def test_put_object_encrypts_and_records_checksum(
    storage: S3StorageService, client: MagicMock
) -> None:
    ref = await storage.put_object("images/u1/a.jpg", b"data", "image/jpeg", {"Owner_Id": "u1"})
    kwargs = client.put_object.call_args.kwargs
    assert kwargs["Bucket"] == "bucket"
    assert kwargs["Key"] == "images/u1/a.jpg"
    assert kwargs["ServerSideEncryption"] == "AES256"
    assert kwargs["Metadata"] == {"sha256": ref.checksum, "owner-id": "u1"}


async def test_put_failure_raises_upload_error(storage: S3StorageService, client: MagicMock) -> None:
    client.put_object.side_effect = _client_error("AccessDenied", "PutObject")
    with pytest.raises(StorageUploadError):
        await storage.put_object("a.jpg", b"x", "image/jpeg")


async def test_missing_object_maps_to_not_found(storage: S3StorageService, client: MagicMock) -> None:
    client.get_object.side_effect = _client_error("NoSuchKey", "GetObject")
    client.head_object.side_effect = _client_error("404")
    with pytest.raises(StorageNotFoundError):
        await storage.get_object("gone.jpg")
    assert not await storage.exists("gone.jpg")
    assert await storage.delete_object("gone.jpg") is False
    client.delete_object.assert_not_called()


async def test_stat_object_reads_head(storage: S3StorageService, client: MagicMock) -> None:
    client.head_object.return_value = {
        "ContentLength": 4,
        "ContentType": "image/png",
        "Metadata": {"sha256": "abc"},
    }
    ref = await storage.stat_object("a.png")
    assert (ref.size, ref.content_type, ref.checksum) == (4, "image/png", "abc")


async def test_sigv4_expiry_is_clamped(client: MagicMock) -> None:
    storage = S3StorageService("bucket", signature_version="s3v4", client=client)
    client.generate_presigned_url.return_value = "https://signed"
    far_future = datetime(2491, 3, 9, tzinfo=UTC)
    assert await storage.get_signed_url("a.jpg", far_future) == "https://signed"
    assert client.generate_presigned_url.call_args.kwargs["ExpiresIn"] == SIGV4_MAX_EXPIRY_SECONDS


async def test_default_signing_keeps_far_future_expiry(
    storage: S3StorageService, client: MagicMock, caplog
) -> None:
    await storage.get_signed_url("a.jpg", datetime(2491, 3, 9, tzinfo=UTC))
    assert client.generate_presigned_url.call_args.kwargs["ExpiresIn"] > SIGV4_MAX_EXPIRY_SECONDS
    assert "clamping" not in caplog.text


async def test_real_client_presigns_sigv4_offline() -> None:
    storage = S3StorageService(
        "bucket",
        region="us-east-1",
        access_key="AKIDEXAMPLE",
        secret_key="secret",
        signature_version="s3v4",
    )
    url = await storage.get_signed_url("images/u1/a.jpg", datetime.now(UTC) + timedelta(hours=1))
    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    assert parsed.path.endswith("images/u1/a.jpg")
    assert query["X-Amz-Algorithm"] == ["AWS4-HMAC-SHA256"]
    assert 3500 <= int(query["X-Amz-Expires"][0]) <= 3600


async def test_real_client_default_url_expires_at_configured_date() -> None:
    storage = S3StorageService(
        "bucket", region="us-east-1", access_key="AKIDEXAMPLE", secret_key="secret"
    )
    expires_at = datetime(2491, 3, 9, tzinfo=UTC)
    url = await storage.get_signed_url("images/u1/a.jpg", expires_at)
    query = parse_qs(urlparse(url).query)
    assert "X-Amz-Expires" not in query
    assert abs(int(query["Expires"][0]) - int(expires_at.timestamp())) <= 5


async def test_namespace_and_policy_keys(storage: S3StorageService, client: MagicMock) -> None:
    await storage.create_namespace("admin/u1")
    assert client.put_object.call_args.kwargs["Key"] == "admin/u1/"

    policy = AccessPolicy.admin_only("admin/u1/")
    await storage.set_access_policy("admin/u1/", policy)
    assert client.put_object.call_args.kwargs["Key"] == ".settings/rules/admin/u1.json"

    body = MagicMock()
    body.read.return_value = encode_policy(policy)
    client.get_object.return_value = {"Body": body}
    assert await storage.get_access_policy("admin/u1/") == policy

    await storage.delete_namespace("admin/u1/")
    deleted = [c.kwargs["Key"] for c in client.delete_object.call_args_list]
    assert deleted == ["admin/u1/", ".settings/rules/admin/u1.json"]


async def test_policy_write_failure(storage: S3StorageService, client: MagicMock) -> None:
    client.put_object.side_effect = _client_error("AccessDenied", "PutObject")
    with pytest.raises(StoragePolicyError):
        await storage.set_access_policy("admin/u1/", AccessPolicy.admin_only("admin/u1/"))
