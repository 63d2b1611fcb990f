"""Firebase service-account loading and Firestore client construction (no firebase-admin).

Credentials come from either FIREBASE_SERVICE_ACCOUNT_KEY (JSON string) or
FIREBASE_SERVICE_ACCOUNT_PATH (file path). Clients are built here and handed
to the app at startup; nothing is kept in module globals.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from app.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
)
from app.infrastructure.firebase.auth_client import (
    IDENTITY_TOOLKIT_SCOPES,
    FirebaseIdentityProvider,
)

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def load_service_account(settings: "Settings") -> dict:
    """Return the service account dict from env key or file path.

    Raises:
        ValueError: Key is not valid JSON, file is missing, or neither is set.
    """
    key_json = (
        settings.firebase_service_account_key.get_secret_value()
        if settings.firebase_service_account_key
        else None
    )
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            raise ValueError(
                f"FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: {path} (resolved: {resolved})"
            )
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    raise ValueError("No Firebase service account configured")


def resolve_project_id(settings: "Settings", key_dict: dict) -> str:
    """Return FIREBASE_PROJECT_ID or the service account's project_id."""
    project_id = settings.firebase_project_id or key_dict.get("project_id")
    if not project_id:
        raise ValueError("Firebase service account JSON missing 'project_id'")
    return project_id


def create_firestore_client(
    settings: "Settings",
    http_client: httpx.AsyncClient | None = None,
) -> FirestoreRESTClient:
    """Build the Firestore REST client from settings."""
    key_dict = load_service_account(settings)
    project_id = resolve_project_id(settings, key_dict)
    client = FirestoreRESTClient(
        project_id,
        _get_credentials(key_dict),
        http_client=http_client,
        timeout=settings.upstream_timeout_seconds,
    )
    logger.info("Firestore client initialized for project %s", project_id)
    return client


def create_firebase_identity_provider(
    settings: "Settings",
    http_client: httpx.AsyncClient | None = None,
) -> FirebaseIdentityProvider:
    """Build the Firebase Auth identity provider from settings."""
    key_dict = load_service_account(settings)
    project_id = resolve_project_id(settings, key_dict)
    web_api_key = (
        settings.firebase_web_api_key.get_secret_value()
        if settings.firebase_web_api_key
        else None
    )
    provider = FirebaseIdentityProvider(
        project_id,
        _get_credentials(key_dict, scopes=IDENTITY_TOOLKIT_SCOPES),
        web_api_key=web_api_key,
        http_client=http_client,
        timeout=settings.upstream_timeout_seconds,
    )
    logger.info("Firebase identity provider initialized for project %s", project_id)
    return provider
