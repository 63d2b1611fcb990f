"""Application lifespan: startup and shutdown.

Builds the backends selected in settings (document store, blob store,
identity provider) unless create_app() was given them, and closes the ones
it built on shutdown. No business logic here, only wiring.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit close backends created here.

    Startup order: logging, document store, identity provider (the local
    provider keeps credentials in the document store), blob store.
    """
    settings = get_settings()
    setup_logging()

    from app.infrastructure.external.storage import create_blob_store
    from app.infrastructure.identity import create_identity_provider
    from app.infrastructure.persistence import create_document_store

    owned = []
    if getattr(app.state, "document_store", None) is None:
        app.state.document_store = create_document_store(settings)
        owned.append(app.state.document_store)
    if getattr(app.state, "identity_provider", None) is None:
        app.state.identity_provider = create_identity_provider(
            settings, app.state.document_store
        )
        owned.append(app.state.identity_provider)
    if getattr(app.state, "blob_store", None) is None:
        app.state.blob_store = create_blob_store(settings)
        owned.append(app.state.blob_store)
    logger.info(
        "%s started (documents=%s, identity=%s, storage=%s)",
        settings.app_name,
        settings.document_backend,
        settings.identity_backend,
        settings.storage_backend,
    )

    yield

    # ---- Shutdown ----
    for backend in reversed(owned):
        await backend.aclose()
    logger.info("Backends closed")
