"""
app/services/upload_service.py

Purpose: User uploads into object storage

- Voice recordings from the onboarding wizard
- Shop images uploaded by shop owners
- Profile avatars
"""

import secrets
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.exceptions import BadRequestError, PayloadTooLargeError
from app.core.logging import get_logger
from app.services.storage_service import get_storage_service
from utils.constants import (
    BUCKET_PRODUCT_IMAGES,
    BUCKET_SHOP_IMAGES,
    BUCKET_VOICE_RECORDINGS,
    DEFAULT_AUDIO_MIME,
    MSG_AUDIO_TOO_LARGE,
    MSG_IMAGE_ONLY,
    MSG_IMAGE_TOO_LARGE,
    MSG_NO_AUDIO,
    MSG_NO_IMAGE,
)
from utils.time_utils import epoch_millis
from utils.validation_utils import file_extension, is_image_content_type

logger = get_logger(__name__)

MB = 1024 * 1024


def validate_image(data: Optional[bytes], content_type: Optional[str]):
    """
    Raises BadRequestError for a missing, non-image or oversized file.
    """
    if not data:
        raise BadRequestError(MSG_NO_IMAGE)
    if not is_image_content_type(content_type):
        raise BadRequestError(MSG_IMAGE_ONLY)
    if len(data) > settings.MAX_IMAGE_SIZE_MB * MB:
        raise BadRequestError(MSG_IMAGE_TOO_LARGE.format(mb=settings.MAX_IMAGE_SIZE_MB))


async def upload_recording(data: Optional[bytes], content_type: Optional[str] = None) -> Dict[str, Any]:
    """
    Stores a wizard recording as recording-<epoch ms>.webm.

    Returns:
        {"audioUrl", "path"}
    """
    if not data:
        raise BadRequestError(MSG_NO_AUDIO)
    if len(data) > settings.MAX_AUDIO_SIZE_MB * MB:
        raise PayloadTooLargeError(MSG_AUDIO_TOO_LARGE.format(mb=settings.MAX_AUDIO_SIZE_MB))

    storage = get_storage_service()
    path = f"recording-{epoch_millis()}.webm"

    await storage.upload(
        BUCKET_VOICE_RECORDINGS,
        path,
        data,
        content_type or DEFAULT_AUDIO_MIME
    )

    logger.info(f"Recording uploaded: {path}")
    return {"audioUrl": storage.public_url(BUCKET_VOICE_RECORDINGS, path), "path": path}


async def upload_shop_image(
    shop_id: Optional[str],
    image_type: Optional[str],
    data: Optional[bytes],
    content_type: Optional[str],
    filename: Optional[str]
) -> Dict[str, Any]:
    """
    Stores a shop image at <shop_id>/<type>-<epoch ms>.<ext>, replacing
    any object at the same path.

    Returns:
        {"url", "path"}
    """
    validate_image(data, content_type)

    storage = get_storage_service()
    ext = file_extension(filename, "jpg")
    path = f"{shop_id or 'general'}/{image_type or 'image'}-{epoch_millis()}.{ext}"

    await storage.upload(BUCKET_SHOP_IMAGES, path, data, content_type, upsert=True)

    logger.info(f"Shop image uploaded: {path}")
    return {"url": storage.public_url(BUCKET_SHOP_IMAGES, path), "path": path}


async def upload_avatar(
    user_id: str,
    data: Optional[bytes],
    content_type: Optional[str],
    filename: Optional[str]
) -> Dict[str, Any]:
    """
    Stores a profile picture as <user_id>-<random>.<ext>.
    """
    validate_image(data, content_type)

    storage = get_storage_service()
    ext = file_extension(filename, "jpg")
    path = f"{user_id}-{secrets.token_hex(4)}.{ext}"

    await storage.upload(BUCKET_PRODUCT_IMAGES, path, data, content_type)

    logger.info(f"Avatar uploaded: {path}")
    return {"url": storage.public_url(BUCKET_PRODUCT_IMAGES, path), "path": path}
