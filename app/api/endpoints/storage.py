"""Signed download endpoint for blob stores that cannot presign URLs themselves (local)."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.api.dependencies import get_blob_store, resolve_download_path
from app.application.interfaces.stores import IBlobStore

router = APIRouter()


@router.get("/storage/download/{token}")
async def download(
    path: Annotated[str, Depends(resolve_download_path)],
    blobs: Annotated[IBlobStore, Depends(get_blob_store)],
) -> Response:
    """Serve the object named by a valid, unexpired download token."""
    ref = await blobs.stat_object(path)
    return Response(
        content=await blobs.get_object(path),
        media_type=ref.content_type,
        headers={"Cache-Control": "private, max-age=3600"},
    )
