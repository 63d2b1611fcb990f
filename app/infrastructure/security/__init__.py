"""Security: JWT issuing/verification and password hashing."""

from app.infrastructure.security.jwt import (
    create_access_token,
    create_download_token,
    verify_download_token,
    verify_token,
)
from app.infrastructure.security.password import (
    get_password_hash,
    hash_password_async,
    verify_password,
    verify_password_async,
)

__all__ = [
    "create_access_token",
    "create_download_token",
    "get_password_hash",
    "hash_password_async",
    "verify_download_token",
    "verify_password",
    "verify_password_async",
    "verify_token",
]
