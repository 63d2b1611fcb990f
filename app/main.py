"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.
No business logic here. See app.core.lifespan and app.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and optionally
clear get_settings cache) before importing or calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import api_router
from app.application.interfaces import IBlobStore, IDocumentStore, IIdentityProvider
from app.core.config import get_settings
from app.core.exception_handlers import register_exception_handlers
from app.core.lifespan import create_lifespan
from app.middleware import (
    RequestIDMiddleware,
    RequestSizeLimitMiddleware,
    TimeoutMiddleware,
)


def create_app(
    document_store: IDocumentStore | None = None,
    blob_store: IBlobStore | None = None,
    identity_provider: IIdentityProvider | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Backends passed here are used as-is (tests pass in-memory ones); missing
    ones are built from settings in the lifespan.
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.document_store = document_store
    app.state.blob_store = blob_store
    app.state.identity_provider = identity_provider

    register_exception_handlers(app)

    # Middleware: last added = outermost. Order: timeout → size limit → request ID → CORS.
    origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_upload_size)
    app.add_middleware(TimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)

    app.include_router(api_router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve with uvicorn on HOST:PORT."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
