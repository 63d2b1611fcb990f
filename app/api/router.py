"""API router aggregation.

Routes are mounted at the root (no version prefix) because existing clients
call the original paths (/upload, /api/projects/{userId}, ...).
"""

from fastapi import APIRouter

from app.api.endpoints import accounts, health, projects, storage

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(accounts.router, tags=["accounts"])
api_router.include_router(projects.router, tags=["projects"])
api_router.include_router(storage.router, tags=["storage"])
