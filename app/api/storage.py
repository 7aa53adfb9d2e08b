# app/api/storage.py - public URLs of photos kept by the local backend
from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse
from app.config import settings
from app.services.local_gateway import resolve_object_path
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/storage", tags=["Storage"])


@router.get("/{bucket}/{path:path}")
async def get_object(bucket: str, path: str):
    if settings.backend != "local":
        raise HTTPException(status_code=404, detail="Object not found")

    try:
        file_path = resolve_object_path(settings.media_root, bucket, path)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid object path")

    if not file_path.is_file():
        raise HTTPException(status_code=404, detail="Object not found")

    return FileResponse(path=str(file_path))
