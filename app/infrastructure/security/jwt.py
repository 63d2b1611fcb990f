"""JWT creation and verification for locally issued credentials.

Two token kinds share the SECRET_KEY: ID tokens issued by the local identity
provider (typ "id") and signed blob download tokens issued by the local
blob store (typ "blob"). Each verifier rejects the other kind.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings

TOKEN_TYPE_ID = "id"
TOKEN_TYPE_BLOB = "blob"


def _encode(claims: dict[str, Any]) -> str:
    settings = get_settings()
    encoded = jwt.encode(
        claims,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def _decode(token: str, token_type: str) -> dict[str, Any]:
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    if payload.get("typ") != token_type:
        raise ValueError("Token has wrong type")
    return payload


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed ID token with the given claims.

    Args:
        data: Claims to encode (sub, email, custom claims).
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    now = datetime.now(UTC)
    to_encode["iat"] = now
    to_encode["exp"] = now + expires_delta
    to_encode["typ"] = TOKEN_TYPE_ID
    return _encode(to_encode)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode an ID token. Returns the payload.

    Raises:
        ValueError: If token is invalid, expired, of the wrong type, or missing sub.
    """
    return _decode(token, TOKEN_TYPE_ID)


def create_download_token(path: str, expires_at: datetime) -> str:
    """Sign a stateless download grant for a stored object."""
    return _encode({"sub": path, "exp": expires_at, "typ": TOKEN_TYPE_BLOB})


def verify_download_token(token: str) -> str:
    """Return the object path a download token grants.

    Raises:
        ValueError: If token is invalid, expired or not a download token.
    """
    return _decode(token, TOKEN_TYPE_BLOB)["sub"]
