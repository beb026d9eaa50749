"""
app/services/product_service.py

Purpose: Products (retail items or menu dishes) of a site

- Create / update / delete products
- Enforce the plan's per-site product limit on every add
"""

import uuid
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING

from app.core.exceptions import BadRequestError, ResourceNotFoundError
from app.core.logging import get_logger
from app.db.mongo import get_products_collection
from app.services import subscription_service
from utils.constants import (
    MSG_PRODUCT_NAME_REQUIRED,
    MSG_PRODUCT_NOT_FOUND,
    PRODUCT_UPDATABLE_FIELDS,
)
from utils.time_utils import utcnow

logger = get_logger(__name__)

PROJECTION = {"_id": 0}


def build_product(site_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalizes an incoming product payload into a stored document.
    "desc" is accepted as an alias of "description".
    """
    name = (data.get("name") or "").strip()
    if not name:
        raise BadRequestError(MSG_PRODUCT_NAME_REQUIRED)

    now = utcnow()
    return {
        "id": str(uuid.uuid4()),
        "site_id": site_id,
        "name": name,
        "price": data.get("price") or 0,
        "description": data.get("desc") or data.get("description") or "",
        "image_url": data.get("image_url"),
        "is_live": data.get("is_live", True) is not False,
        "created_at": now,
        "updated_at": now,
    }


async def list_products(site_id: str) -> List[Dict[str, Any]]:
    products = get_products_collection()
    cursor = products.find({"site_id": site_id}, PROJECTION, sort=[("created_at", ASCENDING)])
    return await cursor.to_list(length=None)


async def count_products(site_id: str) -> int:
    return await get_products_collection().count_documents({"site_id": site_id})


async def insert_products(site_id: str, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Bulk insert used when a site is first published. Items without a name
    are skipped. The caller checks the product limit.
    """
    docs = [build_product(site_id, item) for item in items if (item.get("name") or "").strip()]
    if docs:
        await get_products_collection().insert_many([dict(doc) for doc in docs])
        logger.info(f"Inserted {len(docs)} products for site {site_id}")
    return docs


async def add_product(site: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Adds one product to a site after checking the plan's product limit.

    Raises:
        BadRequestError: Missing product name
        PlanLimitError: Product limit reached
    """
    product = build_product(site["id"], data)
    await subscription_service.check_product_limit(site)

    await get_products_collection().insert_one(dict(product))
    logger.info(f"Product added to site {site['id']}: {product['name']}")
    return product


async def get_product(site_id: str, product_id: str) -> Dict[str, Any]:
    product = await get_products_collection().find_one(
        {"id": product_id, "site_id": site_id},
        PROJECTION
    )
    if not product:
        raise ResourceNotFoundError(MSG_PRODUCT_NOT_FOUND)
    return product


async def update_product(site_id: str, product_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Applies the allowed fields of `updates` (None values ignored).
    """
    await get_product(site_id, product_id)

    changes = {
        field: updates[field]
        for field in PRODUCT_UPDATABLE_FIELDS
        if updates.get(field) is not None
    }
    if "name" in changes:
        changes["name"] = changes["name"].strip()
        if not changes["name"]:
            raise BadRequestError(MSG_PRODUCT_NAME_REQUIRED)
    changes["updated_at"] = utcnow()

    products = get_products_collection()
    await products.update_one({"id": product_id, "site_id": site_id}, {"$set": changes})
    return await get_product(site_id, product_id)


async def set_product_live(site_id: str, product_id: str, is_live: bool) -> Dict[str, Any]:
    return await update_product(site_id, product_id, {"is_live": is_live})


async def delete_product(site_id: str, product_id: str) -> bool:
    result = await get_products_collection().delete_one({"id": product_id, "site_id": site_id})
    if result.deleted_count == 0:
        raise ResourceNotFoundError(MSG_PRODUCT_NOT_FOUND)
    logger.info(f"Product {product_id} deleted from site {site_id}")
    return True


async def delete_site_products(site_id: str) -> int:
    result = await get_products_collection().delete_many({"site_id": site_id})
    return result.deleted_count


def public_product(product: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Shape shown on a published page, or None for hidden products."""
    if product.get("is_live") is False:
        return None
    return {
        "name": product.get("name", ""),
        "price": product.get("price") or 0,
        "description": product.get("description"),
        "image_url": product.get("image_url"),
        "is_live": True,
    }
