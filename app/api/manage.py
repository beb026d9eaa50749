"""
app/api/manage.py

Purpose: Shop-owner dashboard endpoints (cookie session from OTP login)

- Read and edit the owner's shop
- Add / update / delete its products
- Upload shop images
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from app.core.exceptions import BadRequestError, PermissionDeniedError, ResourceNotFoundError
from app.core.security import get_current_shop_owner
from app.schemas.response import SuccessResponse
from app.schemas.site import ManageProductCreate, ManageProductUpdate, ManageShopUpdate
from app.schemas.voice import ImageUploadResponse
from app.services import product_service, site_service, upload_service
from utils.constants import (
    MSG_NO_IMAGE,
    MSG_PRODUCT_NAME_REQUIRED,
    MSG_SITE_NOT_FOUND,
    OWNER_UPDATABLE_FIELDS,
)

router = APIRouter()


def _check_shop_id(owner: Dict[str, str], shop_id: Optional[str]):
    """A shop owner may only address their own shop."""
    if shop_id and shop_id != owner["shop_id"]:
        raise PermissionDeniedError("You can only manage your own shop")


async def _owner_site(owner: Dict[str, str]) -> Dict[str, Any]:
    site = await site_service.get_site_by_id(owner["shop_id"])
    if not site:
        raise ResourceNotFoundError(MSG_SITE_NOT_FOUND)
    return site


@router.get("/shop")
async def get_shop(owner: Dict[str, str] = Depends(get_current_shop_owner)):
    site = await _owner_site(owner)
    return {"shop": await site_service.get_site_with_products(site)}


@router.put("/shop")
async def update_shop(payload: ManageShopUpdate, owner: Dict[str, str] = Depends(get_current_shop_owner)):
    """
    Updates the owner-editable fields; anything else in the body is ignored.
    """
    _check_shop_id(owner, payload.shopId)
    site = await _owner_site(owner)

    updates = payload.model_dump(exclude_unset=True)
    updated = await site_service.apply_site_updates(site, updates, OWNER_UPDATABLE_FIELDS)
    return {"success": True, "shop": updated}


@router.post("/products")
async def add_product(payload: ManageProductCreate, owner: Dict[str, str] = Depends(get_current_shop_owner)):
    if payload.product is None or not (payload.product.name or "").strip():
        raise BadRequestError(MSG_PRODUCT_NAME_REQUIRED)
    _check_shop_id(owner, payload.shopId)

    site = await _owner_site(owner)
    product = await product_service.add_product(site, payload.product.model_dump())
    return {"success": True, "product": product}


@router.put("/products", response_model=SuccessResponse)
async def update_product(payload: ManageProductUpdate, owner: Dict[str, str] = Depends(get_current_shop_owner)):
    if not payload.productId:
        raise BadRequestError("Product ID required")
    _check_shop_id(owner, payload.shopId)

    await product_service.update_product(
        owner["shop_id"],
        payload.productId,
        payload.updates.model_dump(exclude_unset=True)
    )
    return SuccessResponse(success=True)


@router.delete("/products", response_model=SuccessResponse)
async def delete_product(
    productId: Optional[str] = Query(default=None),
    shopId: Optional[str] = Query(default=None),
    owner: Dict[str, str] = Depends(get_current_shop_owner)
):
    if not productId:
        raise BadRequestError("Product ID required")
    _check_shop_id(owner, shopId)

    await product_service.delete_product(owner["shop_id"], productId)
    return SuccessResponse(success=True)


@router.post("/images", response_model=ImageUploadResponse)
async def upload_image(
    image: Optional[UploadFile] = File(default=None),
    type: str = Form(default="image"),
    owner: Dict[str, str] = Depends(get_current_shop_owner)
):
    """
    Stores a shop image (logo, hero, product photo) for the owner's shop.
    """
    if image is None:
        raise BadRequestError(MSG_NO_IMAGE)

    data = await image.read()
    result = await upload_service.upload_shop_image(
        owner["shop_id"],
        type,
        data,
        image.content_type,
        image.filename
    )
    return ImageUploadResponse(success=True, url=result["url"], path=result["path"])
