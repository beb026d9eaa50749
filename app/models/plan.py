"""
app/models/plan.py

Purpose: Subscription plan catalog

- Enum for every purchasable plan
- Plan families (store / menu) and the subscription fields each one drives
- Single source of truth for prices, site limits and product limits
"""

from enum import Enum
from typing import Dict, List, Optional
from dataclasses import dataclass

from app.models.site import SiteType


class PlanFamily(str, Enum):
    STORE = "store"
    MENU = "menu"


class PlanCode(str, Enum):
    """
    Every plan a user can recharge.
    """
    BASE = "base"
    PRO = "pro"
    MENU_BASE = "menu_base"
    MENU_PRO = "menu_pro"


@dataclass(frozen=True)
class FamilyFields:
    """
    Names of the subscription document fields a plan family controls.
    """
    plan: str
    limit: str
    expires_at: str
    label: str
    site_type: SiteType


FAMILY_FIELDS: Dict[PlanFamily, FamilyFields] = {
    PlanFamily.STORE: FamilyFields(
        plan="store_plan",
        limit="shop_limit",
        expires_at="store_expires_at",
        label="Store",
        site_type=SiteType.SHOP,
    ),
    PlanFamily.MENU: FamilyFields(
        plan="menu_plan",
        limit="menu_limit",
        expires_at="menu_expires_at",
        label="Menu",
        site_type=SiteType.MENU,
    ),
}


@dataclass(frozen=True)
class Plan:
    """
    A purchasable plan.
    """
    code: PlanCode
    family: PlanFamily
    display_name: str
    price: int  # INR per month
    site_limit: int
    product_limit: int  # per site
    description: str = ""

    @property
    def billing_name(self) -> str:
        """Name written to billing history, e.g. "pro Store"."""
        return f"{self.code.value} {FAMILY_FIELDS[self.family].label}"


PLANS: Dict[PlanCode, Plan] = {
    PlanCode.BASE: Plan(
        code=PlanCode.BASE,
        family=PlanFamily.STORE,
        display_name="Base Store",
        price=349,
        site_limit=1,
        product_limit=10,
        description="1 Online Store (Shop Credit), 10 Products limit"
    ),
    PlanCode.PRO: Plan(
        code=PlanCode.PRO,
        family=PlanFamily.STORE,
        display_name="Pro Store",
        price=649,
        site_limit=2,
        product_limit=15,
        description="2 Online Stores (Shop Credits), 15 Products limit"
    ),
    PlanCode.MENU_BASE: Plan(
        code=PlanCode.MENU_BASE,
        family=PlanFamily.MENU,
        display_name="Base Menu",
        price=249,
        site_limit=1,
        product_limit=15,
        description="1 Digital Menu (Menu Credit), 15 Items included"
    ),
    PlanCode.MENU_PRO: Plan(
        code=PlanCode.MENU_PRO,
        family=PlanFamily.MENU,
        display_name="Pro Menu",
        price=449,
        site_limit=2,
        product_limit=20,
        description="2 Digital Menus (Menu Credits), 20 Items per menu"
    ),
}

# Plans a brand new subscription points at (with a zero limit until recharged)
DEFAULT_PLANS: Dict[PlanFamily, PlanCode] = {
    PlanFamily.STORE: PlanCode.BASE,
    PlanFamily.MENU: PlanCode.MENU_BASE,
}


def get_plan(code: str) -> Optional[Plan]:
    """
    Looks up a plan by its code.

    Args:
        code: Plan code string ("base", "menu_pro", ...)

    Returns:
        Plan or None if the code is unknown
    """
    try:
        return PLANS[PlanCode(code)]
    except ValueError:
        return None


def family_for_site_type(site_type: SiteType) -> PlanFamily:
    return PlanFamily.MENU if site_type == SiteType.MENU else PlanFamily.STORE


def list_plans(family: Optional[PlanFamily] = None) -> List[Plan]:
    return [plan for plan in PLANS.values() if family is None or plan.family == family]
