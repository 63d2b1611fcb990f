"""API request/response schemas (pydantic)."""

from app.schemas.account import (
    FirstNameResponse,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    ProfileUploadResponse,
    RegisterRequest,
    RegisterResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.project import ImageResponse, ProjectResponse, UploadResponse

__all__ = [
    "FirstNameResponse",
    "HealthResponse",
    "ImageResponse",
    "LoginRequest",
    "LoginResponse",
    "ProfileResponse",
    "ProfileUploadResponse",
    "ProjectResponse",
    "RegisterRequest",
    "RegisterResponse",
    "UploadResponse",
]
