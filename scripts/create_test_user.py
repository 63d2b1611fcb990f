"""Register a test account through the provisioning workflow.

Usage:
    python -m scripts.create_test_user <email> [password] [--admin]
If password is omitted, a random one is printed. Uses the backends selected
in settings (DOCUMENT_BACKEND, IDENTITY_BACKEND, STORAGE_BACKEND).

POST /register only accepts isAdmin=true from an existing admin, so the
first admin is created here with --admin.
"""

import asyncio
import secrets
import sys

from app.application.dtos.account import RegistrationCommand
from app.application.services.registration_service import RegistrationService
from app.core.config import get_settings
from app.domain.exceptions import RegistrationFailedException
from app.infrastructure.external.storage import create_blob_store
from app.infrastructure.identity import create_identity_provider
from app.infrastructure.persistence import create_document_store
from app.shared.telemetry.logging import setup_logging


async def main() -> None:
    """Create the account and print its uid."""
    args = [a for a in sys.argv[1:] if a != "--admin"]
    if not args:
        print(
            "Usage: python -m scripts.create_test_user <email> [password] [--admin]",
            file=sys.stderr,
        )
        sys.exit(1)
    email = args[0]
    password = args[1] if len(args) > 1 else secrets.token_urlsafe(12)
    is_admin = "--admin" in sys.argv

    settings = get_settings()
    setup_logging()
    documents = create_document_store(settings)
    identity = create_identity_provider(settings, documents)
    blobs = create_blob_store(settings)
    try:
        service = RegistrationService(identity, documents, blobs)
        result = await service.register(
            RegistrationCommand(
                first_name="Test",
                last_name="User",
                birthday="2000-01-01",
                email=email,
                password=password,
                is_admin=is_admin,
            )
        )
    except RegistrationFailedException as e:
        print(f"Registration failed at step {e.details.get('step')}", file=sys.stderr)
        sys.exit(1)
    finally:
        await blobs.aclose()
        await identity.aclose()
        await documents.aclose()
    print(f"Created user: {result.user_id} ({email}, admin={is_admin})")
    print(f"Password: {password}")


if __name__ == "__main__":
    asyncio.run(main())
