"""Serves posters persisted by the file output mode."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from app.infrastructure.dependencies import get_poster_storage
from app.infrastructure.storage.local_file_storage import LocalFileStorage

router = APIRouter(prefix="/images", tags=["Posters"])


@router.get("/{file_name}")
async def get_poster_image(
    file_name: str,
    storage: LocalFileStorage = Depends(get_poster_storage),
) -> FileResponse:
    """Return a stored poster PNG."""
    path = storage.resolve_poster(file_name)
    if path is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    return FileResponse(
        path,
        media_type="image/png",
        headers={"Cache-Control": "public, max-age=31536000, immutable"},
    )
