"""FirebaseIdentityProvider against a mocked Identity Toolkit."""

import json

import httpx
import pytest

from app.domain.exceptions import InvalidCredentialsException, InvalidTokenError
from app.infrastructure.exceptions import IdentityProviderError
from app.infrastructure.firebase import auth_client
from app.infrastructure.firebase.auth_client import FirebaseIdentityProvider


class FakeCredentials:
    valid = True
    token = "svc-token"


def _provider(handler, web_api_key: str | None = "web-key") -> FirebaseIdentityProvider:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FirebaseIdentityProvider(
        "demo", FakeCredentials(), web_api_key=web_api_key, http_client=http
    )


def _error(status: int, message: str) -> httpx.Response:
    return httpx.Response(status, json={"error": {"code": status, "message": message}})


async def test_create_user_returns_local_id() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/projects/demo/accounts"
        assert request.headers["Authorization"] == "Bearer svc-token"
        assert json.loads(request.content) == {"email": "a@example.com", "password": "secret1"}
        return httpx.Response(200, json={"localId": "fb-uid"})

    assert await _provider(handler).create_user("a@example.com", "secret1") == "fb-uid"


async def test_create_user_surfaces_provider_reason() -> None:
    provider = _provider(lambda request: _error(400, "EMAIL_EXISTS"))
    with pytest.raises(IdentityProviderError) as exc_info:
        await provider.create_user("a@example.com", "secret1")
    assert exc_info.value.details == {"operation": "create_user", "reason": "EMAIL_EXISTS"}


async def test_delete_user_ignores_missing_user() -> None:
    await _provider(lambda request: _error(400, "USER_NOT_FOUND")).delete_user("gone")
    with pytest.raises(IdentityProviderError):
        await _provider(lambda request: _error(500, "INTERNAL")).delete_user("u1")


async def test_set_custom_claims_sends_json_attributes() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/projects/demo/accounts:update"
        body = json.loads(request.content)
        assert body["localId"] == "u1"
        assert json.loads(body["customAttributes"]) == {"admin": True}
        return httpx.Response(200, json={"localId": "u1"})

    await _provider(handler).set_custom_claims("u1", {"admin": True})


async def test_sign_in_returns_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/accounts:signInWithPassword"
        assert request.url.params["key"] == "web-key"
        assert json.loads(request.content)["returnSecureToken"] is True
        return httpx.Response(
            200, json={"localId": "u1", "idToken": "id-token", "expiresIn": "3600"}
        )

    result = await _provider(handler).sign_in("a@example.com", "secret1")
    assert (result.uid, result.id_token, result.expires_in) == ("u1", "id-token", 3600)


@pytest.mark.parametrize(
    "reason",
    ["INVALID_PASSWORD", "EMAIL_NOT_FOUND", "INVALID_LOGIN_CREDENTIALS", "USER_DISABLED : disabled"],
)
async def test_sign_in_rejections_are_invalid_credentials(reason: str) -> None:
    with pytest.raises(InvalidCredentialsException):
        await _provider(lambda request: _error(400, reason)).sign_in("a@example.com", "x")


async def test_sign_in_without_web_api_key_is_provider_error() -> None:
    provider = _provider(lambda request: httpx.Response(200, json={}), web_api_key=None)
    with pytest.raises(IdentityProviderError):
        await provider.sign_in("a@example.com", "x")


async def test_verify_id_token_adds_uid(monkeypatch) -> None:
    def fake_verify(token: str, project_id: str) -> dict:
        assert (token, project_id) == ("tok", "demo")
        return {"sub": "u1", "admin": True}

    monkeypatch.setattr(auth_client, "_verify_firebase_token_sync", fake_verify)
    claims = await _provider(lambda request: httpx.Response(200)).verify_id_token("tok")
    assert claims == {"sub": "u1", "admin": True, "uid": "u1"}


async def test_verify_id_token_failure_is_invalid_token(monkeypatch) -> None:
    def fake_verify(token: str, project_id: str) -> dict:
        raise ValueError("Token expired")

    monkeypatch.setattr(auth_client, "_verify_firebase_token_sync", fake_verify)
    with pytest.raises(InvalidTokenError):
        await _provider(lambda request: httpx.Response(200)).verify_id_token("tok")


def test_sync_verifier_checks_issuer_and_subject(monkeypatch) -> None:
    def claims_for(**claims):
        return lambda token, request, audience: claims

    monkeypatch.setattr(
        auth_client.google_id_token,
        "verify_firebase_token",
        claims_for(iss="https://securetoken.google.com/other", sub="u1"),
    )
    with pytest.raises(ValueError, match="issuer"):
        auth_client._verify_firebase_token_sync("tok", "demo")

    monkeypatch.setattr(
        auth_client.google_id_token,
        "verify_firebase_token",
        claims_for(iss="https://securetoken.google.com/demo", sub="x" * 129),
    )
    with pytest.raises(ValueError, match="subject"):
        auth_client._verify_firebase_token_sync("tok", "demo")

    monkeypatch.setattr(
        auth_client.google_id_token,
        "verify_firebase_token",
        claims_for(iss="https://securetoken.google.com/demo", sub="u1"),
    )
    assert auth_client._verify_firebase_token_sync("tok", "demo")["sub"] == "u1"
