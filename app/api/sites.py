"""
app/api/sites.py

Purpose: Site and product management for signed-in accounts

- Publish a site from the onboarding wizard payload
- List / read / edit / publish toggle / delete own sites
- Manage the products of an owned site
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from app.core.security import get_current_user_id
from app.schemas.response import SuccessResponse
from app.schemas.site import (
    LiveToggle,
    ProductIn,
    ProductOut,
    ProductUpdate,
    SiteCreate,
    SiteCreateResponse,
    SiteUpdate,
)
from app.services import product_service, site_service

router = APIRouter()


@router.post("", response_model=SiteCreateResponse, status_code=201)
async def create_site(payload: SiteCreate, user_id: str = Depends(get_current_user_id)):
    """
    Publishes a Shop or Menu. Checks the plan, picks a unique slug and
    stores the products sent with it.
    """
    site = await site_service.create_site(user_id, payload.model_dump())
    return SiteCreateResponse(success=True, siteId=site["id"], slug=site["slug"])


@router.get("")
async def list_sites(
    type: Optional[str] = Query(default=None, description="Shop or Menu"),
    user_id: str = Depends(get_current_user_id)
) -> List[Dict[str, Any]]:
    return await site_service.list_sites(user_id, type)


@router.post("/claim-orphans")
async def claim_orphans(user_id: str = Depends(get_current_user_id)):
    """Assigns sites created without an account to the caller."""
    return await site_service.claim_orphan_sites(user_id)


@router.get("/{site_id}")
async def get_site(site_id: str, user_id: str = Depends(get_current_user_id)):
    site = await site_service.get_owned_site(user_id, site_id)
    return await site_service.get_site_with_products(site)


@router.patch("/{site_id}")
async def update_site(site_id: str, payload: SiteUpdate, user_id: str = Depends(get_current_user_id)):
    return await site_service.update_site(user_id, site_id, payload.model_dump(exclude_unset=True))


@router.post("/{site_id}/live")
async def toggle_live(site_id: str, payload: LiveToggle, user_id: str = Depends(get_current_user_id)):
    return await site_service.set_site_live(user_id, site_id, payload.is_live)


@router.delete("/{site_id}")
async def delete_site(site_id: str, user_id: str = Depends(get_current_user_id)):
    return await site_service.delete_site(user_id, site_id)


# ============================================================
# PRODUCTS
# ============================================================

@router.post("/{site_id}/products", response_model=ProductOut, status_code=201)
async def add_product(site_id: str, payload: ProductIn, user_id: str = Depends(get_current_user_id)):
    site = await site_service.get_owned_site(user_id, site_id)
    return await product_service.add_product(site, payload.model_dump())


@router.patch("/{site_id}/products/{product_id}", response_model=ProductOut)
async def update_product(
    site_id: str,
    product_id: str,
    payload: ProductUpdate,
    user_id: str = Depends(get_current_user_id)
):
    await site_service.get_owned_site(user_id, site_id)
    return await product_service.update_product(site_id, product_id, payload.model_dump(exclude_unset=True))


@router.post("/{site_id}/products/{product_id}/live", response_model=ProductOut)
async def toggle_product_live(
    site_id: str,
    product_id: str,
    payload: LiveToggle,
    user_id: str = Depends(get_current_user_id)
):
    await site_service.get_owned_site(user_id, site_id)
    return await product_service.set_product_live(site_id, product_id, payload.is_live)


@router.delete("/{site_id}/products/{product_id}", response_model=SuccessResponse)
async def delete_product(site_id: str, product_id: str, user_id: str = Depends(get_current_user_id)):
    await site_service.get_owned_site(user_id, site_id)
    await product_service.delete_product(site_id, product_id)
    return SuccessResponse(success=True, message="Product deleted")
