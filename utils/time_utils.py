"""
utils/time_utils.py

Purpose: Time and expiry helpers

- Naive-UTC "now" matching what MongoDB hands back
- OTP and plan expiry checks
- Millisecond timestamps for generated file names and slugs
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """
    Current UTC time without tzinfo (MongoDB returns naive UTC datetimes).
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def epoch_millis() -> int:
    """Milliseconds since the epoch."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def calculate_otp_expiry(otp_time: datetime, validity_minutes: int = 10) -> datetime:
    """
    Calculates OTP expiry timestamp.
    """
    return otp_time + timedelta(minutes=validity_minutes)


def is_expired(expires_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """
    True when the timestamp is missing or lies in the past.
    """
    if not expires_at:
        return True
    now = now or utcnow()
    if expires_at.tzinfo is not None:
        expires_at = expires_at.astimezone(timezone.utc).replace(tzinfo=None)
    return expires_at < now


def days_left(expires_at: Optional[datetime], now: Optional[datetime] = None) -> int:
    """
    Whole days remaining until expiry, rounded up and floored at zero.
    """
    if not expires_at:
        return 0
    now = now or utcnow()
    if expires_at.tzinfo is not None:
        expires_at = expires_at.astimezone(timezone.utc).replace(tzinfo=None)
    remaining = (expires_at - now).total_seconds() / 86400
    return max(0, math.ceil(remaining))


def format_timestamp(dt: Optional[datetime], format_str: str = "%Y-%m-%d %H:%M:%S") -> str:
    """
    Formats a datetime object to string.
    """
    if not dt:
        return "N/A"
    return dt.strftime(format_str)
