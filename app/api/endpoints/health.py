"""Liveness endpoints. No dependencies; used by load balancers and smoke tests."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.core.config import get_settings
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/test", response_class=PlainTextResponse)
def smoke_test() -> str:
    return "Success!"


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return ok with the version and configured backends."""
    settings = get_settings()
    return HealthResponse(
        version=settings.app_version,
        document_backend=settings.document_backend,
        identity_backend=settings.identity_backend,
        storage_backend=settings.storage_backend,
    )
