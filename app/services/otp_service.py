"""
app/services/otp_service.py

Purpose: Phone OTP login for shop owners

- Validates and normalizes the phone number
- Rate limits OTP requests per phone
- Generates, stores (one active code per phone) and delivers OTPs
- Verifies codes and resolves the owner's site
"""

import secrets
from typing import Any, Dict

from app.core.config import settings
from app.core.exceptions import (
    AuthenticationError,
    BadRequestError,
    RateLimitError,
    ResourceNotFoundError,
)
from app.core.logging import get_logger, LogContext
from app.db.mongo import (
    get_otp_codes_collection,
    get_shop_owners_collection,
    get_sites_collection,
)
from app.services.rate_limit_service import check_rate_limit
from app.services.sms_service import get_sms_service
from utils.constants import (
    MSG_INVALID_PHONE,
    MSG_OTP_EXPIRED,
    MSG_OTP_INVALID,
    MSG_OTP_REQUIRED,
    MSG_OTP_SENT,
    MSG_OWNER_NOT_FOUND,
    MSG_PHONE_NOT_OWNER,
    MSG_PHONE_REQUIRED,
    MSG_SITE_NOT_FOUND,
)
from utils.time_utils import calculate_otp_expiry, is_expired, utcnow
from utils.validation_utils import normalize_phone, validate_otp_format, validate_phone_number

logger = get_logger(__name__)

OTP_LENGTH = 6


def generate_otp() -> str:
    """6-digit numeric code from a CSPRNG."""
    return f"{secrets.randbelow(10 ** OTP_LENGTH):0{OTP_LENGTH}d}"


async def send_otp(phone: str) -> Dict[str, Any]:
    """
    Issues a login code for a registered shop owner.

    Args:
        phone: Raw phone number ("98765 43210", "+919876543210", ...)

    Returns:
        {"success", "message", "otp", "phone"}; "otp" is for development
        responses only and must not reach clients in production

    Raises:
        BadRequestError: Missing or malformed phone
        ResourceNotFoundError: Phone is not a registered shop owner
        RateLimitError: Too many requests for this phone
    """
    if not phone:
        raise BadRequestError(MSG_PHONE_REQUIRED)
    if not validate_phone_number(phone):
        raise BadRequestError(MSG_INVALID_PHONE)

    formatted = normalize_phone(phone)

    with LogContext(phone=formatted):
        owner = await get_shop_owners_collection().find_one({"phone": formatted})
        if not owner:
            logger.info("OTP requested for unregistered phone")
            raise ResourceNotFoundError(MSG_PHONE_NOT_OWNER)

        limit = await check_rate_limit(
            f"otp:{formatted}",
            max_requests=settings.RATE_LIMIT_OTP_PER_HOUR,
            window_seconds=3600
        )
        if not limit["allowed"]:
            raise RateLimitError(
                "Too many OTP requests. Please try again later.",
                details={"retry_after_seconds": limit.get("retry_after_seconds")}
            )

        otp = generate_otp()
        now = utcnow()

        await get_otp_codes_collection().update_one(
            {"phone": formatted},
            {
                "$set": {
                    "code": otp,
                    "expires_at": calculate_otp_expiry(now, settings.OTP_EXPIRY_MINUTES),
                    "created_at": now
                }
            },
            upsert=True
        )

        delivery = await get_sms_service().send_otp(formatted, otp, settings.OTP_EXPIRY_MINUTES)
        if not delivery.get("success"):
            logger.warning(f"OTP SMS delivery failed: {delivery.get('error')}")

        logger.info("OTP issued")

    return {"success": True, "message": MSG_OTP_SENT, "otp": otp, "phone": formatted}


async def verify_otp(phone: str, otp: str) -> Dict[str, Any]:
    """
    Checks a login code and returns the owner and their site id.
    The code is consumed on success.

    Returns:
        {"owner_id", "shop_id", "phone"}

    Raises:
        BadRequestError: Missing phone or code
        AuthenticationError: Wrong or expired code
        ResourceNotFoundError: Owner or site no longer exists
    """
    if not phone or not otp:
        raise BadRequestError(MSG_OTP_REQUIRED)

    formatted = normalize_phone(phone)
    code = str(otp).strip()

    with LogContext(phone=formatted):
        otp_codes = get_otp_codes_collection()

        record = None
        if validate_otp_format(code):
            record = await otp_codes.find_one({"phone": formatted, "code": code})
        if not record:
            logger.info("Invalid OTP submitted")
            raise AuthenticationError(MSG_OTP_INVALID)

        if is_expired(record.get("expires_at")):
            logger.info("Expired OTP submitted")
            raise AuthenticationError(MSG_OTP_EXPIRED)

        await otp_codes.delete_one({"phone": formatted})

        owner = await get_shop_owners_collection().find_one({"phone": formatted})
        if not owner or not owner.get("shop_id"):
            raise ResourceNotFoundError(MSG_OWNER_NOT_FOUND)

        site = await get_sites_collection().find_one({"id": owner["shop_id"]}, {"_id": 0, "id": 1})
        if not site:
            raise ResourceNotFoundError(MSG_SITE_NOT_FOUND)

        logger.info("Shop owner logged in")

    return {"owner_id": owner["id"], "shop_id": owner["shop_id"], "phone": formatted}
