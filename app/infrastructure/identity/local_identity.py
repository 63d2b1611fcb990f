"""Self-hosted identity provider: bcrypt credentials in the document store, JWT ID tokens.

Credentials live at credentials/{uid} ({email, passwordHash, customClaims,
createdAt}); credential_emails/{email} maps a lower-cased email to its uid so
duplicate registrations are rejected. Tokens are signed with SECRET_KEY.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any
from urllib.parse import quote

from app.application.dtos.identity import SignInResult
from app.application.interfaces.stores import IDocumentStore
from app.domain.exceptions import InvalidCredentialsException, InvalidTokenError
from app.infrastructure.exceptions import IdentityProviderError
from app.infrastructure.security.jwt import create_access_token, verify_token
from app.infrastructure.security.password import (
    hash_password_async,
    verify_password_async,
)
from app.shared.collections import COLLECTION_CREDENTIAL_EMAILS, COLLECTION_CREDENTIALS
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
_RESERVED_CLAIMS = {"sub", "exp", "iat", "typ", "uid", "email"}


def _email_key(email: str) -> str:
    """Lower-cased email, percent-encoded so it is a valid document id."""
    return quote(email.strip().lower(), safe="@")


class LocalIdentityProvider:
    """Identity provider backed by the document store (implements IIdentityProvider)."""

    def __init__(self, documents: IDocumentStore, token_ttl_minutes: int = 60) -> None:
        self._documents = documents
        self._token_ttl = timedelta(minutes=token_ttl_minutes)

    def _credential_path(self, uid: str) -> str:
        return f"{COLLECTION_CREDENTIALS}/{uid}"

    def _email_path(self, email: str) -> str:
        return f"{COLLECTION_CREDENTIAL_EMAILS}/{_email_key(email)}"

    async def create_user(self, email: str, password: str) -> str:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise IdentityProviderError("create_user", "WEAK_PASSWORD")
        if await self._documents.get_document(self._email_path(email)) is not None:
            raise IdentityProviderError("create_user", "EMAIL_EXISTS")
        uid = generate_cuid()
        await self._documents.set_document(
            self._credential_path(uid),
            {
                "email": email,
                "passwordHash": await hash_password_async(password),
                "customClaims": {},
                "createdAt": utc_now(),
            },
        )
        await self._documents.set_document(self._email_path(email), {"uid": uid})
        logger.info("Created local credential %s", uid)
        return uid

    async def delete_user(self, uid: str) -> None:
        credential = await self._documents.get_document(self._credential_path(uid))
        if credential is None:
            return
        email = credential.data.get("email")
        if email:
            await self._documents.delete_document(self._email_path(email))
        await self._documents.delete_document(self._credential_path(uid))

    async def set_custom_claims(self, uid: str, claims: dict[str, Any]) -> None:
        reserved = _RESERVED_CLAIMS.intersection(claims)
        if reserved:
            raise IdentityProviderError(
                "set_custom_claims", f"Reserved claims: {sorted(reserved)}"
            )
        # DocumentNotFoundError propagates for unknown uids
        await self._documents.update_document(
            self._credential_path(uid), {"customClaims": dict(claims)}
        )

    async def verify_id_token(self, token: str) -> dict[str, Any]:
        try:
            claims = verify_token(token)
        except ValueError as e:
            raise InvalidTokenError(str(e)) from e
        claims["uid"] = claims["sub"]
        return claims

    async def sign_in(self, email: str, password: str) -> SignInResult:
        index = await self._documents.get_document(self._email_path(email))
        if index is None:
            raise InvalidCredentialsException("EMAIL_NOT_FOUND")
        uid = index.data.get("uid", "")
        credential = await self._documents.get_document(self._credential_path(uid))
        if credential is None:
            raise InvalidCredentialsException("EMAIL_NOT_FOUND")
        if not await verify_password_async(password, credential.data.get("passwordHash", "")):
            raise InvalidCredentialsException("INVALID_PASSWORD")
        token = create_access_token(
            {
                "sub": uid,
                "email": credential.data.get("email"),
                **(credential.data.get("customClaims") or {}),
            },
            expires_delta=self._token_ttl,
        )
        return SignInResult(
            uid=uid,
            id_token=token,
            expires_in=int(self._token_ttl.total_seconds()),
        )

    async def aclose(self) -> None:
        return None
