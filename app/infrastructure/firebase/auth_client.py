"""Firebase Auth identity provider over the Identity Toolkit REST API (no firebase-admin).

Admin operations (create, delete, custom claims) authenticate with the
service account via google-auth. ID tokens are verified against Google's
public certificates with google.oauth2.id_token. Password sign-in uses the
project's web API key.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx
from google.auth import exceptions as google_auth_exceptions
from google.auth.transport.requests import Request
from google.oauth2 import id_token as google_id_token

from app.application.dtos.identity import SignInResult
from app.domain.exceptions import InvalidCredentialsException, InvalidTokenError
from app.infrastructure.exceptions import IdentityProviderError
from app.infrastructure.firebase._rest_client import _get_access_token

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_SCOPES = [
    "https://www.googleapis.com/auth/cloud-platform",
    "https://www.googleapis.com/auth/identitytoolkit",
]
_BASE = "https://identitytoolkit.googleapis.com/v1"
_ISSUER_PREFIX = "https://securetoken.google.com/"
_SIGN_IN_REJECTIONS = {
    "EMAIL_NOT_FOUND",
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
    "USER_DISABLED",
}


def _error_reason(resp: httpx.Response) -> str:
    """Extract Identity Toolkit error code (e.g. EMAIL_EXISTS) from a response."""
    try:
        return resp.json().get("error", {}).get("message", "") or resp.reason_phrase
    except ValueError:
        return resp.reason_phrase


def _verify_firebase_token_sync(token: str, project_id: str) -> dict[str, Any]:
    """Blocking: fetch certs and verify signature, expiry, audience and issuer."""
    claims = google_id_token.verify_firebase_token(token, Request(), audience=project_id)
    if not claims:
        raise ValueError("Token verification returned no claims")
    if claims.get("iss") != f"{_ISSUER_PREFIX}{project_id}":
        raise ValueError("Token has incorrect issuer")
    sub = claims.get("sub")
    if not isinstance(sub, str) or not sub or len(sub) > 128:
        raise ValueError("Token has invalid subject")
    return claims


class FirebaseIdentityProvider:
    """Identity provider backed by Firebase Auth (implements IIdentityProvider)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        web_api_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._web_api_key = web_api_key
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it."""
        if self._owns_http:
            await self._http.aclose()

    async def _admin_post(self, operation: str, url: str, body: dict) -> dict:
        """POST an admin request with a service-account bearer token."""
        token = await asyncio.to_thread(_get_access_token, self._credentials)
        try:
            resp = await self._http.post(
                url, json=body, headers={"Authorization": f"Bearer {token}"}
            )
        except httpx.HTTPError as e:
            raise IdentityProviderError(operation, str(e)) from e
        if resp.status_code != 200:
            raise IdentityProviderError(operation, _error_reason(resp))
        return resp.json() if resp.content else {}

    async def create_user(self, email: str, password: str) -> str:
        """Create an email/password account; return its uid (localId)."""
        out = await self._admin_post(
            "create_user",
            f"{_BASE}/projects/{self._project_id}/accounts",
            {"email": email, "password": password},
        )
        uid = out.get("localId")
        if not uid:
            raise IdentityProviderError("create_user", "response missing localId")
        return uid

    async def delete_user(self, uid: str) -> None:
        try:
            await self._admin_post(
                "delete_user",
                f"{_BASE}/projects/{self._project_id}/accounts:delete",
                {"localId": uid},
            )
        except IdentityProviderError as e:
            if e.details.get("reason") != "USER_NOT_FOUND":
                raise

    async def set_custom_claims(self, uid: str, claims: dict[str, Any]) -> None:
        await self._admin_post(
            "set_custom_claims",
            f"{_BASE}/projects/{self._project_id}/accounts:update",
            {"localId": uid, "customAttributes": json.dumps(claims)},
        )

    async def verify_id_token(self, token: str) -> dict[str, Any]:
        """Verify a Firebase ID token; return its claims with 'uid' set to sub."""
        try:
            claims = await asyncio.to_thread(
                _verify_firebase_token_sync, token, self._project_id
            )
        except (ValueError, google_auth_exceptions.GoogleAuthError) as e:
            raise InvalidTokenError(str(e)) from e
        claims = dict(claims)
        claims["uid"] = claims["sub"]
        return claims

    async def sign_in(self, email: str, password: str) -> SignInResult:
        """Password sign-in via accounts:signInWithPassword (needs FIREBASE_WEB_API_KEY)."""
        if not self._web_api_key:
            raise IdentityProviderError("sign_in", "FIREBASE_WEB_API_KEY is not configured")
        try:
            resp = await self._http.post(
                f"{_BASE}/accounts:signInWithPassword",
                params={"key": self._web_api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
            )
        except httpx.HTTPError as e:
            raise IdentityProviderError("sign_in", str(e)) from e
        if resp.status_code != 200:
            reason = _error_reason(resp)
            if reason.split(" ")[0] in _SIGN_IN_REJECTIONS:
                raise InvalidCredentialsException(reason)
            raise IdentityProviderError("sign_in", reason)
        out = resp.json()
        return SignInResult(
            uid=out["localId"],
            id_token=out["idToken"],
            expires_in=int(out.get("expiresIn", 3600)),
        )
