"""LocalIdentityProvider: bcrypt credentials in the document store and JWT ID tokens."""

from datetime import UTC, datetime, timedelta

import pytest

from app.domain.exceptions import InvalidCredentialsException, InvalidTokenError
from app.infrastructure.exceptions import DocumentNotFoundError, IdentityProviderError
from app.infrastructure.identity.local_identity import LocalIdentityProvider
from app.infrastructure.memory import InMemoryDocumentStore
from app.infrastructure.security.jwt import create_download_token


@pytest.fixture
def provider() -> LocalIdentityProvider:
    return LocalIdentityProvider(InMemoryDocumentStore(), token_ttl_minutes=5)


async def test_sign_in_token_carries_uid_email_and_claims(provider: LocalIdentityProvider) -> None:
    uid = await provider.create_user("Ada@Example.com", "secret-pass")
    await provider.set_custom_claims(uid, {"admin": True})

    result = await provider.sign_in("ada@example.com", "secret-pass")
    assert result.uid == uid
    assert result.expires_in == 300

    claims = await provider.verify_id_token(result.id_token)
    assert claims["uid"] == claims["sub"] == uid
    assert claims["email"] == "Ada@Example.com"
    assert claims["admin"] is True


async def test_password_hash_is_stored_not_password(provider: LocalIdentityProvider) -> None:
    uid = await provider.create_user("a@example.com", "secret-pass")
    credential = await provider._documents.get_document(f"credentials/{uid}")
    assert credential is not None
    assert credential.data["passwordHash"] != "secret-pass"
    assert credential.data["passwordHash"].startswith("$2")


async def test_duplicate_email_and_weak_password_rejected(provider: LocalIdentityProvider) -> None:
    await provider.create_user("a@example.com", "secret-pass")
    with pytest.raises(IdentityProviderError) as dup:
        await provider.create_user("A@example.com ", "other-pass")
    assert dup.value.details["reason"] == "EMAIL_EXISTS"

    with pytest.raises(IdentityProviderError) as weak:
        await provider.create_user("b@example.com", "12345")
    assert weak.value.details["reason"] == "WEAK_PASSWORD"


async def test_wrong_password_and_unknown_email(provider: LocalIdentityProvider) -> None:
    await provider.create_user("a@example.com", "secret-pass")
    with pytest.raises(InvalidCredentialsException):
        await provider.sign_in("a@example.com", "wrong-pass")
    with pytest.raises(InvalidCredentialsException):
        await provider.sign_in("nobody@example.com", "secret-pass")


async def test_delete_user_frees_email_and_is_idempotent(provider: LocalIdentityProvider) -> None:
    uid = await provider.create_user("a@example.com", "secret-pass")
    await provider.delete_user(uid)
    await provider.delete_user(uid)
    with pytest.raises(InvalidCredentialsException):
        await provider.sign_in("a@example.com", "secret-pass")
    assert await provider.create_user("a@example.com", "secret-pass") != uid


async def test_reserved_and_unknown_claim_targets(provider: LocalIdentityProvider) -> None:
    uid = await provider.create_user("a@example.com", "secret-pass")
    with pytest.raises(IdentityProviderError):
        await provider.set_custom_claims(uid, {"sub": "someone-else"})
    with pytest.raises(DocumentNotFoundError):
        await provider.set_custom_claims("ghost", {"admin": True})


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
async def test_malformed_tokens_are_invalid(provider: LocalIdentityProvider, token: str) -> None:
    with pytest.raises(InvalidTokenError):
        await provider.verify_id_token(token)


async def test_download_token_is_not_an_id_token(provider: LocalIdentityProvider) -> None:
    token = create_download_token("profiles/u1/a.png", datetime.now(UTC) + timedelta(hours=1))
    with pytest.raises(InvalidTokenError):
        await provider.verify_id_token(token)


async def test_expired_token_is_invalid() -> None:
    provider = LocalIdentityProvider(InMemoryDocumentStore(), token_ttl_minutes=-1)
    await provider.create_user("a@example.com", "secret-pass")
    result = await provider.sign_in("a@example.com", "secret-pass")
    with pytest.raises(InvalidTokenError):
        await provider.verify_id_token(result.id_token)
