"""
app/api/files.py

Purpose: Public download of stored objects (recordings, shop images, avatars)
"""

from fastapi import APIRouter
from fastapi.responses import Response

from app.services.storage_service import get_storage_service

router = APIRouter()


@router.get("/{bucket}/{path:path}")
async def get_file(bucket: str, path: str):
    data, content_type = await get_storage_service().download(bucket, path)
    return Response(
        content=data,
        media_type=content_type,
        headers={"Cache-Control": "public, max-age=3600"}
    )
