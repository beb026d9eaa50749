"""
app/api/profile.py

Purpose: Account profile (settings page)
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from app.core.exceptions import BadRequestError
from app.core.security import get_current_user_id
from app.schemas.profile import ProfileOut, ProfileUpdate
from app.services import upload_service, user_service
from utils.constants import MSG_NO_IMAGE

router = APIRouter()


@router.get("", response_model=ProfileOut)
async def get_profile(user_id: str = Depends(get_current_user_id)):
    return await user_service.get_profile(user_id)


@router.put("", response_model=ProfileOut)
async def update_profile(payload: ProfileUpdate, user_id: str = Depends(get_current_user_id)):
    return await user_service.update_profile(user_id, payload.model_dump(exclude_unset=True))


@router.post("/avatar", response_model=ProfileOut)
async def upload_avatar(
    image: Optional[UploadFile] = File(default=None),
    user_id: str = Depends(get_current_user_id)
):
    if image is None:
        raise BadRequestError(MSG_NO_IMAGE)

    data = await image.read()
    result = await upload_service.upload_avatar(user_id, data, image.content_type, image.filename)
    return await user_service.update_profile(user_id, {"avatar_url": result["url"]})
