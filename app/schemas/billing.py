"""
app/schemas/billing.py

Purpose: Subscription, plan and billing history schemas
"""

from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class PlanOut(BaseModel):
    code: str
    family: str
    display_name: str
    price: int
    site_limit: int
    product_limit: int
    description: str


class FamilyStatus(BaseModel):
    plan: str
    limit: int
    used: int
    expires_at: Optional[datetime] = None
    active: bool
    days_left: int


class SubscriptionOut(BaseModel):
    id: str
    user_id: str
    store_plan: str
    menu_plan: str
    shop_limit: int
    menu_limit: int
    store_expires_at: Optional[datetime] = None
    menu_expires_at: Optional[datetime] = None
    store: Optional[FamilyStatus] = None
    menu: Optional[FamilyStatus] = None


class RechargeRequest(BaseModel):
    plan: str


class BillingRecord(BaseModel):
    id: str
    user_id: str
    plan_name: str
    amount: int
    status: str
    created_at: datetime


class BillingHistoryResponse(BaseModel):
    records: List[BillingRecord]
