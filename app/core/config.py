"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend-specific required fields (Firebase service account,
SECRET_KEY, S3 bucket) are validated at load time.
"""

from datetime import UTC, datetime
from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.shared.utils.datetime import ensure_utc

_DOCUMENT_BACKENDS = ("firestore", "memory")
_IDENTITY_BACKENDS = ("firebase", "local")
_STORAGE_BACKENDS = ("s3", "local", "memory")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_backends (Firebase credentials, secret_key, s3_bucket when the
    selected backends need them).
    """

    # App
    app_name: str = "portfolio-gateway"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3002

    # Backends
    document_backend: str = "firestore"
    identity_backend: str = "firebase"
    storage_backend: str = "s3"

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None
    firebase_project_id: str | None = None  # Defaults to project_id in the service account
    firebase_web_api_key: SecretStr | None = None  # Required for /login with firebase

    # Local identity provider and local signed URLs
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Storage
    storage_root: str = "/var/portfolio/storage"
    storage_base_url: str | None = None
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None
    # "s3" (SigV2) keeps the far-future expiry, so stored URLs stay valid.
    # "s3v4" presigned URLs are capped at 7 days.
    s3_signature_version: str = "s3"
    signed_url_expires_at: datetime = datetime(2491, 3, 9, tzinfo=UTC)

    # Uploads
    max_upload_size: int = 50 * 1024 * 1024  # 50MB
    max_project_images: int = 5

    # Outbound calls (httpx and boto3)
    upstream_timeout_seconds: float = 30.0

    # CORS
    allowed_origins: str = "*"

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_backends(self) -> "Settings":
        """Validate backend names and the credentials each backend needs.

        - firestore / firebase: FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH.
        - local identity or local storage: SECRET_KEY (signs tokens and download URLs).
        - s3 storage: S3_BUCKET.
        """
        self.document_backend = self.document_backend.lower()
        self.identity_backend = self.identity_backend.lower()
        self.storage_backend = self.storage_backend.lower()
        if self.document_backend not in _DOCUMENT_BACKENDS:
            raise ValueError(
                f"document_backend must be one of {_DOCUMENT_BACKENDS}, got: {self.document_backend!r}"
            )
        if self.identity_backend not in _IDENTITY_BACKENDS:
            raise ValueError(
                f"identity_backend must be one of {_IDENTITY_BACKENDS}, got: {self.identity_backend!r}"
            )
        if self.storage_backend not in _STORAGE_BACKENDS:
            raise ValueError(
                f"Invalid storage_backend '{self.storage_backend}'. "
                f"Must be one of: {', '.join(_STORAGE_BACKENDS)}"
            )
        if self.document_backend == "firestore" or self.identity_backend == "firebase":
            has_key = (
                self.firebase_service_account_key
                and self.firebase_service_account_key.get_secret_value()
            )
            if not has_key and not self.firebase_service_account_path:
                raise ValueError(
                    "Firestore/Firebase backends need FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) "
                    "or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
                )
        if "local" in (self.identity_backend, self.storage_backend):
            if not self.secret_key.get_secret_value():
                raise ValueError(
                    "SECRET_KEY is required for the local identity provider and local storage. "
                    "Generate with: openssl rand -hex 32."
                )
        if self.storage_backend == "s3" and not self.s3_bucket:
            raise ValueError(
                "s3_bucket is required when storage_backend is 's3'. "
                "Set S3_BUCKET environment variable or update .env file."
            )
        self.signed_url_expires_at = ensure_utc(self.signed_url_expires_at)
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
