"""
app/services/rate_limit_service.py

Purpose: Sliding-window rate limiting backed by MongoDB

- Counts requests per key inside a time window
- Window documents expire through a TTL index
- Used to throttle OTP requests per phone number
"""

from datetime import timedelta
from typing import Any, Dict

from app.db.mongo import get_rate_limits_collection
from app.core.logging import get_logger
from utils.time_utils import utcnow

logger = get_logger(__name__)


async def check_rate_limit(key: str, max_requests: int, window_seconds: int) -> Dict[str, Any]:
    """
    Records a request for `key` and reports whether it is within the limit.

    Args:
        key: Rate limit bucket, e.g. "otp:+919876543210"
        max_requests: Requests allowed inside the window
        window_seconds: Window length

    Returns:
        Dict with allowed (bool), remaining (int), reset_at (datetime)
        and retry_after_seconds when blocked
    """
    rate_limits = get_rate_limits_collection()

    now = utcnow()
    window_start = now - timedelta(seconds=window_seconds)

    entry = await rate_limits.find_one({"key": key})

    if not entry:
        await rate_limits.insert_one({
            "key": key,
            "requests": [now],
            "created_at": now,
            "expires_at": now + timedelta(seconds=window_seconds)
        })

        return {
            "allowed": True,
            "remaining": max_requests - 1,
            "reset_at": now + timedelta(seconds=window_seconds)
        }

    recent_requests = [
        req for req in entry.get("requests", [])
        if req > window_start
    ]

    if len(recent_requests) >= max_requests:
        oldest_request = min(recent_requests)
        reset_at = oldest_request + timedelta(seconds=window_seconds)

        logger.warning(
            "Rate limit exceeded",
            extra={"key": key, "count": len(recent_requests), "max": max_requests}
        )

        return {
            "allowed": False,
            "remaining": 0,
            "reset_at": reset_at,
            "retry_after_seconds": max(0, int((reset_at - now).total_seconds()))
        }

    recent_requests.append(now)

    await rate_limits.update_one(
        {"key": key},
        {
            "$set": {
                "requests": recent_requests,
                "expires_at": now + timedelta(seconds=window_seconds)
            }
        }
    )

    return {
        "allowed": True,
        "remaining": max_requests - len(recent_requests),
        "reset_at": now + timedelta(seconds=window_seconds)
    }
