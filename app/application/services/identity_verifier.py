"""Bearer credential verification."""

from __future__ import annotations

import logging

from app.application.dtos.identity import Identity
from app.application.interfaces.services import IIdentityProvider
from app.domain.exceptions import InvalidTokenError, UnauthorizedException

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from 'Bearer <token>' or None if the header is malformed."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


class IdentityVerifier:
    """Turns an Authorization header into a verified Identity.

    Every failure (missing header, wrong scheme, bad or expired token, provider
    error) raises the same UnauthorizedException. The cause is only logged.
    """

    def __init__(self, provider: IIdentityProvider) -> None:
        self.provider = provider

    async def verify(self, authorization: str | None) -> Identity:
        token = extract_bearer_token(authorization)
        if token is None:
            raise UnauthorizedException()
        try:
            claims = await self.provider.verify_id_token(token)
        except InvalidTokenError as e:
            logger.warning("Rejected bearer token: %s", e)
            raise UnauthorizedException() from e
        except Exception as e:
            logger.warning("Token verification failed: %s: %s", type(e).__name__, e)
            raise UnauthorizedException() from e
        uid = claims.get("uid") or claims.get("sub")
        if not uid:
            raise UnauthorizedException()
        return Identity(uid=uid, email=claims.get("email"), claims=claims)
