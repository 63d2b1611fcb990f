"""DTOs for identity verification and sign-in."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Identity:
    """Verified caller: token subject plus its claim set."""

    uid: str
    email: str | None = None
    claims: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.claims.get("admin") is True


@dataclass(frozen=True)
class SignInResult:
    """Result of a password sign-in against the identity provider."""

    uid: str
    id_token: str
    expires_in: int
