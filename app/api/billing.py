"""
app/api/billing.py

Purpose: Plans, subscription status, recharge and billing history
"""

from typing import List

from fastapi import APIRouter, Depends

from app.core.security import get_current_user_id
from app.models.plan import list_plans
from app.schemas.billing import (
    BillingHistoryResponse,
    PlanOut,
    RechargeRequest,
    SubscriptionOut,
)
from app.services import subscription_service

router = APIRouter()


@router.get("/plans", response_model=List[PlanOut])
async def get_plans():
    return [
        PlanOut(
            code=plan.code.value,
            family=plan.family.value,
            display_name=plan.display_name,
            price=plan.price,
            site_limit=plan.site_limit,
            product_limit=plan.product_limit,
            description=plan.description
        )
        for plan in list_plans()
    ]


@router.get("/subscription", response_model=SubscriptionOut)
async def get_subscription(user_id: str = Depends(get_current_user_id)):
    return await subscription_service.get_subscription_status(user_id)


@router.post("/recharge", response_model=SubscriptionOut)
async def recharge(payload: RechargeRequest, user_id: str = Depends(get_current_user_id)):
    """
    Buys a plan. A family that is still active cannot be recharged.
    """
    return await subscription_service.recharge(user_id, payload.plan)


@router.get("/history", response_model=BillingHistoryResponse)
async def billing_history(user_id: str = Depends(get_current_user_id)):
    records = await subscription_service.get_billing_history(user_id)
    return BillingHistoryResponse(records=records)
