"""Pytest configuration and fixtures for the portfolio gateway.

HTTP tests run against create_app() with in-memory document and blob stores
and the local identity provider, so no Firebase project or bucket is needed.
Environment is set before app.* is imported because settings are validated
on first use.
"""

import os

os.environ["DOCUMENT_BACKEND"] = "memory"
os.environ["IDENTITY_BACKEND"] = "local"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SECRET_KEY"] = "test-secret-key-for-pytest-only-0123456789abcdef"

import uuid  # noqa: E402
from collections.abc import Awaitable, Callable  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.application.dtos.account import RegistrationCommand  # noqa: E402
from app.application.services.registration_service import RegistrationService  # noqa: E402
from app.core.config import get_settings  # noqa: E402
from app.infrastructure.identity.local_identity import LocalIdentityProvider  # noqa: E402
from app.infrastructure.memory import InMemoryBlobStore, InMemoryDocumentStore  # noqa: E402
from app.main import create_app  # noqa: E402

get_settings.cache_clear()

TEST_PASSWORD = "correct-horse-battery"

AccountFactory = Callable[..., Awaitable[tuple[str, dict[str, str]]]]


@pytest.fixture
def documents() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def blobs() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def identity_provider(documents: InMemoryDocumentStore) -> LocalIdentityProvider:
    return LocalIdentityProvider(documents)


@pytest.fixture
def app(
    documents: InMemoryDocumentStore,
    blobs: InMemoryBlobStore,
    identity_provider: LocalIdentityProvider,
) -> FastAPI:
    """App wired to fresh in-memory backends (lifespan does not run under ASGITransport)."""
    return create_app(
        document_store=documents,
        blob_store=blobs,
        identity_provider=identity_provider,
    )


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def bootstrap_admin(
    documents: InMemoryDocumentStore,
    blobs: InMemoryBlobStore,
    identity_provider: LocalIdentityProvider,
) -> dict[str, str]:
    """Provision an admin outside HTTP, the way scripts/create_test_user.py --admin does.

    Returns bearer headers for that admin.
    """
    email = f"root-{uuid.uuid4().hex[:10]}@example.com"
    await RegistrationService(identity_provider, documents, blobs).register(
        RegistrationCommand(
            first_name="Root",
            last_name="Admin",
            birthday="1970-01-01",
            email=email,
            password=TEST_PASSWORD,
            is_admin=True,
        )
    )
    result = await identity_provider.sign_in(email, TEST_PASSWORD)
    return {"Authorization": f"Bearer {result.id_token}"}


async def register_and_login(
    client: AsyncClient,
    first_name: str = "Ada",
    admin_headers: dict[str, str] | None = None,
) -> tuple[str, dict[str, str]]:
    """Register through POST /register, sign in through POST /login.

    Passing admin_headers registers an admin account on behalf of that admin.
    Returns (uid, headers) where headers carry the bearer token.
    """
    email = f"user-{uuid.uuid4().hex[:10]}@example.com"
    registered = await client.post(
        "/register",
        headers=admin_headers or {},
        json={
            "firstName": first_name,
            "lastName": "Lovelace",
            "bday": "1815-12-10",
            "email": email,
            "password": TEST_PASSWORD,
            "isAdmin": admin_headers is not None,
        },
    )
    assert registered.status_code == 200, registered.text
    login = await client.post("/login", json={"email": email, "password": TEST_PASSWORD})
    assert login.status_code == 200, login.text
    token = login.json()["idToken"]
    return registered.json()["userId"], {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin_headers(
    documents: InMemoryDocumentStore,
    blobs: InMemoryBlobStore,
    identity_provider: LocalIdentityProvider,
) -> dict[str, str]:
    """Bearer headers of an admin provisioned before the test."""
    return await bootstrap_admin(documents, blobs, identity_provider)


@pytest.fixture
def create_account(
    client: AsyncClient,
    documents: InMemoryDocumentStore,
    blobs: InMemoryBlobStore,
    identity_provider: LocalIdentityProvider,
) -> AccountFactory:
    """Account factory bound to the default client.

    Admin accounts are registered with the headers of a bootstrapped admin.
    """

    async def _create(is_admin: bool = False, first_name: str = "Ada") -> tuple[str, dict[str, str]]:
        sponsor = None
        if is_admin:
            sponsor = await bootstrap_admin(documents, blobs, identity_provider)
        return await register_and_login(client, first_name=first_name, admin_headers=sponsor)

    return _create


@pytest.fixture
def create_account_for():
    """Account factory for tests that build their own client."""
    return register_and_login
