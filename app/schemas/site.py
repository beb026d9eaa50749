"""
app/schemas/site.py

Purpose: Site and product payload schemas

- SiteCreate mirrors what the onboarding wizard posts (flat site fields + products)
- Update payloads only carry the fields a caller may change
- PublicShop is the shape a published page is rendered from
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime


def _stringify_number(v):
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


class ProductIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    price: float = 0
    description: Optional[str] = Field(default=None)
    desc: Optional[str] = Field(default=None, description="Alias sent by the onboarding wizard")
    image_url: Optional[str] = None
    is_live: bool = True

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v):
        if v in (None, ""):
            return 0
        return v


class ProductUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_live: Optional[bool] = None


class ProductOut(BaseModel):
    id: str
    site_id: str
    name: str
    price: float = 0
    description: Optional[str] = ""
    image_url: Optional[str] = None
    is_live: bool = True


class SiteCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    products: List[ProductIn] = Field(default_factory=list)
    timing: Optional[str] = None
    location: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None
    image_url: Optional[str] = None
    owner_name: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    whatsapp_number: Optional[str] = None
    tagline: Optional[str] = None
    established_year: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    address: Optional[str] = None

    @field_validator("established_year", "pincode", "contact_number", "whatsapp_number", mode="before")
    @classmethod
    def stringify(cls, v):
        # The LLM sometimes returns these as numbers
        return _stringify_number(v)


class SiteCreateResponse(BaseModel):
    success: bool = True
    siteId: str
    slug: str


class SiteUpdate(BaseModel):
    """Every field optional; only the ones sent are applied."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    description: Optional[str] = None
    timing: Optional[str] = None
    location: Optional[str] = None
    image_url: Optional[str] = None
    owner_name: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    whatsapp_number: Optional[str] = None
    tagline: Optional[str] = None
    established_year: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    address: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None

    @field_validator("established_year", "pincode", "contact_number", "whatsapp_number", mode="before")
    @classmethod
    def stringify(cls, v):
        return _stringify_number(v)


class ManageShopUpdate(BaseModel):
    """Body of PUT /manage/shop. Only owner-editable fields are read."""
    model_config = ConfigDict(extra="ignore")

    shopId: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    timing: Optional[str] = None
    location: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    whatsapp_number: Optional[str] = None
    image_url: Optional[str] = None
    tagline: Optional[str] = None

    @field_validator("contact_number", "whatsapp_number", mode="before")
    @classmethod
    def stringify(cls, v):
        return _stringify_number(v)


class LiveToggle(BaseModel):
    is_live: bool


class ShopContact(BaseModel):
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    email: Optional[str] = None


class PublicProduct(BaseModel):
    name: str
    price: float = 0
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_live: bool = True


class PublicShop(BaseModel):
    id: str
    slug: str
    name: str
    type: str
    description: Optional[str] = None
    tagline: Optional[str] = None
    image_url: Optional[str] = None
    timings: Optional[str] = None
    location: Optional[str] = None
    contact: ShopContact
    social_links: Optional[Dict[str, Any]] = None
    products: List[PublicProduct] = Field(default_factory=list)
    is_live: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ManageProductCreate(BaseModel):
    """Body of POST /manage/products."""
    shopId: Optional[str] = None
    product: Optional[ProductIn] = None


class ManageProductUpdate(BaseModel):
    shopId: Optional[str] = None
    productId: Optional[str] = None
    updates: ProductUpdate = Field(default_factory=ProductUpdate)
