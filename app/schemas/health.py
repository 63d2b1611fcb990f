"""Liveness response schema."""

from app.schemas.base import CamelModel


class HealthResponse(CamelModel):
    """GET /health: status, version and the backends this process was started with."""

    status: str = "ok"
    version: str | None = None
    document_backend: str | None = None
    identity_backend: str | None = None
    storage_backend: str | None = None
