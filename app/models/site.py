"""
app/models/site.py

Purpose: Site type definitions

- Shop vs Menu site types
- Normalization of the loosely typed "type" field sent by clients
"""

from enum import Enum
from typing import Optional


class SiteType(str, Enum):
    """
    Kind of published page. Menus are for restaurants and cafes,
    shops for retail businesses.
    """
    SHOP = "Shop"
    MENU = "Menu"


def normalize_site_type(value: Optional[str]) -> SiteType:
    """
    Anything other than exactly "Menu" is treated as a Shop.
    """
    return SiteType.MENU if value == SiteType.MENU.value else SiteType.SHOP
