"""
app/services/subscription_service.py

Purpose: Subscription plans, limits and billing

- Lazily creates a subscription for every account
- Enforces site and product limits before anything is published
- Recharges a plan family and writes billing history
"""

import uuid
from datetime import timedelta
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from app.core.config import settings
from app.core.exceptions import ConflictError, PlanLimitError, ValidationError
from app.core.logging import get_logger, LogContext
from app.db.mongo import (
    get_billing_history_collection,
    get_products_collection,
    get_sites_collection,
    get_subscriptions_collection,
)
from app.models.plan import (
    DEFAULT_PLANS,
    FAMILY_FIELDS,
    Plan,
    PlanFamily,
    PLANS,
    PlanCode,
    family_for_site_type,
    get_plan,
)
from app.models.site import SiteType
from utils.constants import (
    MSG_LIMIT_REACHED,
    MSG_NO_ACTIVE_PLAN,
    MSG_PLAN_EXPIRED,
    MSG_PLAN_STILL_ACTIVE,
    MSG_PRODUCT_LIMIT_REACHED,
)
from utils.time_utils import days_left, format_timestamp, is_expired, utcnow

logger = get_logger(__name__)

PROJECTION = {"_id": 0}


def _new_subscription(user_id: str) -> Dict[str, Any]:
    now = utcnow()
    return {
        "id": str(uuid.uuid4()),
        "user_id": user_id,
        "store_plan": DEFAULT_PLANS[PlanFamily.STORE].value,
        "menu_plan": DEFAULT_PLANS[PlanFamily.MENU].value,
        "shop_limit": 0,
        "menu_limit": 0,
        "store_expires_at": now,
        "menu_expires_at": now,
        "created_at": now,
        "updated_at": now,
    }


async def get_or_create_subscription(user_id: str) -> Dict[str, Any]:
    """
    Returns the user's subscription, creating an empty one (no credits,
    already expired) the first time.
    """
    subscriptions = get_subscriptions_collection()

    subscription = await subscriptions.find_one({"user_id": user_id}, PROJECTION)
    if subscription:
        return subscription

    subscription = _new_subscription(user_id)
    await subscriptions.insert_one(dict(subscription))
    logger.info(f"Created default subscription for {user_id}")
    return subscription


def is_family_active(subscription: Dict[str, Any], family: PlanFamily) -> bool:
    fields = FAMILY_FIELDS[family]
    limit = subscription.get(fields.limit) or 0
    return limit > 0 and not is_expired(subscription.get(fields.expires_at))


def family_plan(subscription: Dict[str, Any], family: PlanFamily) -> Plan:
    """
    The plan currently selected for a family (falls back to the family default).
    """
    plan = get_plan(subscription.get(FAMILY_FIELDS[family].plan) or "")
    if plan is None or plan.family != family:
        plan = PLANS[DEFAULT_PLANS[family]]
    return plan


async def count_sites(user_id: str, site_type: SiteType) -> int:
    sites = get_sites_collection()
    return await sites.count_documents({"user_id": user_id, "type": site_type.value})


def _family_status(subscription: Dict[str, Any], family: PlanFamily, used: int) -> Dict[str, Any]:
    fields = FAMILY_FIELDS[family]
    expires_at = subscription.get(fields.expires_at)
    active = is_family_active(subscription, family)
    return {
        "plan": family_plan(subscription, family).code.value,
        "limit": subscription.get(fields.limit) or 0,
        "used": used,
        "expires_at": expires_at,
        "active": active,
        "days_left": days_left(expires_at) if active else 0,
    }


async def get_subscription_status(user_id: str) -> Dict[str, Any]:
    """
    Subscription document plus a computed status block per plan family.
    """
    subscription = await get_or_create_subscription(user_id)

    status = dict(subscription)
    for family in PlanFamily:
        used = await count_sites(user_id, FAMILY_FIELDS[family].site_type)
        status[family.value] = _family_status(subscription, family, used)
    return status


async def check_site_limit(user_id: str, site_type: SiteType) -> Dict[str, Any]:
    """
    Verifies the user may publish one more site of the given type.

    Args:
        user_id: Account id
        site_type: Shop or Menu

    Returns:
        The subscription document

    Raises:
        PlanLimitError: Plan expired, no plan bought, or limit reached
    """
    family = family_for_site_type(site_type)
    fields = FAMILY_FIELDS[family]

    with LogContext(user_id=user_id):
        subscription = await get_or_create_subscription(user_id)
        limit = subscription.get(fields.limit) or 0

        if limit > 0 and is_expired(subscription.get(fields.expires_at)):
            logger.info(f"{fields.label} plan expired")
            raise PlanLimitError(MSG_PLAN_EXPIRED.format(label=fields.label))

        current = await count_sites(user_id, site_type)
        if current >= limit:
            logger.info(f"{fields.label} limit hit ({current}/{limit})")
            if limit == 0:
                raise PlanLimitError(MSG_NO_ACTIVE_PLAN.format(label=fields.label))
            raise PlanLimitError(MSG_LIMIT_REACHED.format(label=fields.label, limit=limit))

        return subscription


async def get_product_limit(user_id: Optional[str], site_type: SiteType) -> int:
    """
    Products allowed per site for the user's current plan in that family.
    Sites without an owner account use the family's default plan.
    """
    family = family_for_site_type(site_type)
    if not user_id:
        return PLANS[DEFAULT_PLANS[family]].product_limit

    subscription = await get_or_create_subscription(user_id)
    return family_plan(subscription, family).product_limit


async def check_product_limit(site: Dict[str, Any], adding: int = 1) -> int:
    """
    Raises PlanLimitError when `adding` more products would exceed the
    plan's per-site product limit. Returns the limit.
    """
    site_type = SiteType(site.get("type") or SiteType.SHOP.value)
    limit = await get_product_limit(site.get("user_id"), site_type)

    products = get_products_collection()
    current = await products.count_documents({"site_id": site["id"]})

    if current + adding > limit:
        label = FAMILY_FIELDS[family_for_site_type(site_type)].label
        logger.info(f"Product limit hit on site {site['id']} ({current}+{adding}/{limit})")
        raise PlanLimitError(MSG_PRODUCT_LIMIT_REACHED.format(limit=limit, label=label))
    return limit


async def recharge(user_id: str, plan_code: str) -> Dict[str, Any]:
    """
    Buys a plan: sets the family's plan, site limit and a fresh expiry,
    and records the payment.

    Args:
        user_id: Account id
        plan_code: "base", "pro", "menu_base" or "menu_pro"

    Returns:
        Updated subscription with status blocks

    Raises:
        ValidationError: Unknown plan
        ConflictError: The plan family is still active
    """
    plan = get_plan(plan_code)
    if plan is None:
        raise ValidationError(
            f"Unknown plan: {plan_code}",
            details={"allowed": [code.value for code in PlanCode]}
        )

    fields = FAMILY_FIELDS[plan.family]

    with LogContext(user_id=user_id):
        subscription = await get_or_create_subscription(user_id)

        if is_family_active(subscription, plan.family):
            expires = format_timestamp(subscription.get(fields.expires_at), "%d %b %Y")
            raise ConflictError(
                MSG_PLAN_STILL_ACTIVE.format(label=fields.label, expires=expires)
            )

        now = utcnow()
        await get_subscriptions_collection().update_one(
            {"user_id": user_id},
            {
                "$set": {
                    fields.plan: plan.code.value,
                    fields.limit: plan.site_limit,
                    fields.expires_at: now + timedelta(days=settings.PLAN_DURATION_DAYS),
                    "updated_at": now,
                }
            }
        )

        await get_billing_history_collection().insert_one({
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "plan_name": plan.billing_name,
            "amount": plan.price,
            "status": "Success",
            "created_at": now,
        })

        logger.info(f"Recharged {plan.billing_name} for Rs {plan.price}")

    return await get_subscription_status(user_id)


async def get_billing_history(user_id: str) -> List[Dict[str, Any]]:
    """Billing records for the user, newest first."""
    billing = get_billing_history_collection()
    cursor = billing.find({"user_id": user_id}, PROJECTION, sort=[("created_at", DESCENDING)])
    return await cursor.to_list(length=None)
