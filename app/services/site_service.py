"""
app/services/site_service.py

Purpose: Published sites (shops and menus)

- Site creation: plan limit check, unique slug, products, owner registration
- Owner-scoped listing, updates, publish toggle and deletion
- Public, read-only view of a site by slug
"""

import uuid
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import BadRequestError, ConflictError, PlanLimitError, ResourceNotFoundError
from app.core.logging import get_logger, LogContext, mask_phone
from app.db.mongo import get_shop_owners_collection, get_sites_collection
from app.models.plan import FAMILY_FIELDS, family_for_site_type
from app.models.site import SiteType, normalize_site_type
from app.services import product_service, subscription_service
from utils.constants import (
    MSG_PRODUCT_LIMIT_REACHED,
    MSG_SITE_NAME_REQUIRED,
    MSG_SITE_NOT_FOUND,
    MSG_SLUG_UNAVAILABLE,
    SITE_UPDATABLE_FIELDS,
)
from utils.time_utils import utcnow
from utils.validation_utils import (
    format_contact_number,
    generate_slug,
    normalize_phone,
    validate_phone_number,
)

logger = get_logger(__name__)

PROJECTION = {"_id": 0}

SLUG_INSERT_ATTEMPTS = 5

# Flat site fields copied from the creation payload as-is
SITE_FIELDS = (
    "description",
    "timing",
    "location",
    "social_links",
    "image_url",
    "owner_name",
    "email",
    "whatsapp_number",
    "tagline",
    "established_year",
    "state",
    "pincode",
    "address",
)


async def generate_unique_slug(name: str) -> str:
    """
    Slug for a new site. On collision appends -1, -2, ... until free.

    Examples:
        "Vaigai Traders" -> "vaigai-traders"
        second "Vaigai Traders" -> "vaigai-traders-1"
    """
    sites = get_sites_collection()

    base = generate_slug(name)
    slug = base
    counter = 1

    while await sites.find_one({"slug": slug}, {"_id": 1}):
        slug = f"{base}-{counter}"
        counter += 1

    return slug


async def _insert_with_unique_slug(site: Dict[str, Any], name: str) -> str:
    """
    Inserts the site under a free slug. A slug claimed by another request
    between the lookup and the insert (unique index on sites.slug) is
    recomputed.

    Raises:
        ConflictError: No free slug after SLUG_INSERT_ATTEMPTS tries
    """
    sites = get_sites_collection()

    for _ in range(SLUG_INSERT_ATTEMPTS):
        site["slug"] = await generate_unique_slug(name)
        try:
            await sites.insert_one(dict(site))
            return site["slug"]
        except DuplicateKeyError:
            logger.warning(f"Slug {site['slug']} was taken concurrently, retrying")

    raise ConflictError(MSG_SLUG_UNAVAILABLE)


async def register_shop_owner(phone: Optional[str], shop_id: str) -> Optional[str]:
    """
    Lets the site's contact number log in with OTP to manage it.
    A phone manages one site; registering it again moves it to the new site.

    Returns:
        The normalized phone, or None if the number is not a valid mobile
    """
    if not phone or not validate_phone_number(phone):
        return None

    normalized = normalize_phone(phone)
    now = utcnow()

    await get_shop_owners_collection().update_one(
        {"phone": normalized},
        {
            "$set": {"shop_id": shop_id, "updated_at": now},
            "$setOnInsert": {"id": str(uuid.uuid4()), "created_at": now}
        },
        upsert=True
    )

    logger.info(f"Shop owner {mask_phone(normalized)} registered for site {shop_id}")
    return normalized


async def create_site(user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Publishes a new site for the user.

    Args:
        user_id: Account id of the creator
        payload: Flat site fields plus "products" (see SiteCreate)

    Returns:
        The stored site document

    Raises:
        BadRequestError: Name missing
        PlanLimitError: Plan expired / missing / full, or too many products
    """
    site_type = normalize_site_type(payload.get("type"))
    name = (payload.get("name") or "").strip()
    if not name:
        raise BadRequestError(MSG_SITE_NAME_REQUIRED)

    with LogContext(user_id=user_id):
        await subscription_service.check_site_limit(user_id, site_type)

        items = [
            item for item in payload.get("products") or []
            if (item.get("name") or "").strip()
        ]
        product_limit = await subscription_service.get_product_limit(user_id, site_type)
        if len(items) > product_limit:
            label = FAMILY_FIELDS[family_for_site_type(site_type)].label
            raise PlanLimitError(MSG_PRODUCT_LIMIT_REACHED.format(limit=product_limit, label=label))

        now = utcnow()

        site = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "type": site_type.value,
            "name": name,
            "contact_number": format_contact_number(payload.get("contact_number")),
            "is_live": True,
            "created_at": now,
            "updated_at": now,
        }
        for field in SITE_FIELDS:
            site[field] = payload.get(field)

        slug = await _insert_with_unique_slug(site, name)
        logger.info(f"Site created: {slug} ({site_type.value})")

        await product_service.insert_products(site["id"], items)
        await register_shop_owner(site["contact_number"], site["id"])

    return site


async def list_sites(user_id: str, site_type: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    The user's sites, newest first, each with a product_count.
    """
    query: Dict[str, Any] = {"user_id": user_id}
    if site_type:
        query["type"] = normalize_site_type(site_type).value

    cursor = get_sites_collection().find(query, PROJECTION, sort=[("created_at", DESCENDING)])
    sites = await cursor.to_list(length=None)

    for site in sites:
        site["product_count"] = await product_service.count_products(site["id"])
    return sites


async def get_site_by_id(site_id: str) -> Optional[Dict[str, Any]]:
    return await get_sites_collection().find_one({"id": site_id}, PROJECTION)


async def get_owned_site(user_id: str, site_id: str) -> Dict[str, Any]:
    """
    Site owned by the user. Sites of other users look exactly like missing ones.

    Raises:
        ResourceNotFoundError
    """
    site = await get_site_by_id(site_id)
    if not site or site.get("user_id") != user_id:
        raise ResourceNotFoundError(MSG_SITE_NOT_FOUND)
    return site


async def get_site_with_products(site: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(site)
    result["products"] = await product_service.list_products(site["id"])
    return result


async def apply_site_updates(
    site: Dict[str, Any],
    updates: Dict[str, Any],
    allowed_fields=SITE_UPDATABLE_FIELDS
) -> Dict[str, Any]:
    """
    Writes the allowed, non-None fields of `updates` to the site.
    The slug never changes after creation.

    Returns:
        The updated site document
    """
    changes = {
        field: updates[field]
        for field in allowed_fields
        if updates.get(field) is not None
    }

    if "name" in changes:
        changes["name"] = changes["name"].strip()
        if not changes["name"]:
            raise BadRequestError(MSG_SITE_NAME_REQUIRED)

    if "contact_number" in changes:
        changes["contact_number"] = format_contact_number(changes["contact_number"])

    changes["updated_at"] = utcnow()

    sites = get_sites_collection()
    await sites.update_one({"id": site["id"]}, {"$set": changes})

    if changes.get("contact_number") and changes["contact_number"] != site.get("contact_number"):
        await register_shop_owner(changes["contact_number"], site["id"])

    logger.info(f"Site {site['id']} updated: {sorted(k for k in changes if k != 'updated_at')}")
    return await get_site_by_id(site["id"])


async def update_site(user_id: str, site_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    site = await get_owned_site(user_id, site_id)
    return await apply_site_updates(site, updates)


async def set_site_live(user_id: str, site_id: str, is_live: bool) -> Dict[str, Any]:
    site = await get_owned_site(user_id, site_id)

    await get_sites_collection().update_one(
        {"id": site["id"]},
        {"$set": {"is_live": is_live, "updated_at": utcnow()}}
    )
    logger.info(f"Site {site['slug']} is now {'live' if is_live else 'offline'}")
    return await get_site_by_id(site["id"])


async def delete_site(user_id: str, site_id: str) -> Dict[str, Any]:
    """
    Deletes a site together with its products and shop-owner logins.
    """
    site = await get_owned_site(user_id, site_id)

    deleted_products = await product_service.delete_site_products(site["id"])
    await get_shop_owners_collection().delete_many({"shop_id": site["id"]})
    await get_sites_collection().delete_one({"id": site["id"]})

    logger.info(f"Site {site['slug']} deleted ({deleted_products} products)")
    return {"success": True, "deleted_products": deleted_products}


async def claim_orphan_sites(user_id: str) -> Dict[str, Any]:
    """
    Assigns every site without an owner account to the caller.
    """
    sites = get_sites_collection()
    orphan_filter = {"user_id": None}

    orphans = await sites.find(orphan_filter, PROJECTION).to_list(length=None)
    if not orphans:
        return {"success": True, "count": 0, "sites": []}

    await sites.update_many(
        {"id": {"$in": [site["id"] for site in orphans]}},
        {"$set": {"user_id": user_id, "updated_at": utcnow()}}
    )

    logger.info(f"Claimed {len(orphans)} orphan sites for {user_id}")
    return {
        "success": True,
        "count": len(orphans),
        "sites": [{"id": site["id"], "name": site.get("name"), "slug": site.get("slug")} for site in orphans],
    }


def describe_site(site: Dict[str, Any]) -> str:
    """
    Stored description, or one composed from the year and address fields.
    """
    if site.get("description"):
        return site["description"]

    def part(field: str) -> str:
        return str(site.get(field) or "")

    return (
        f"Established in {part('established_year')}. "
        f"{part('address')}, {part('location')}, {part('state')} - {part('pincode')}"
    )


async def get_public_shop(slug: str) -> Dict[str, Any]:
    """
    Public view of a site. Offline sites are returned without products.

    Raises:
        ResourceNotFoundError
    """
    site = await get_sites_collection().find_one({"slug": slug}, PROJECTION)
    if not site:
        raise ResourceNotFoundError(MSG_SITE_NOT_FOUND)

    is_live = site.get("is_live") is not False
    products: List[Dict[str, Any]] = []
    if is_live:
        for product in await product_service.list_products(site["id"]):
            shown = product_service.public_product(product)
            if shown:
                products.append(shown)

    return {
        "id": site["id"],
        "slug": site["slug"],
        "name": site.get("name") or "",
        "type": site.get("type") or SiteType.SHOP.value,
        "description": describe_site(site),
        "tagline": site.get("tagline"),
        "image_url": site.get("image_url"),
        "timings": site.get("timing"),
        "location": site.get("location"),
        "contact": {
            "phone": site.get("contact_number"),
            "email": site.get("email"),
            "whatsapp": site.get("whatsapp_number"),
        },
        "social_links": site.get("social_links"),
        "products": products,
        "is_live": is_live,
        "created_at": site.get("created_at"),
        "updated_at": site.get("updated_at"),
    }
