"""
utils/validation_utils.py

Purpose: Input validation and normalization

- Indian phone number validation and +91 normalization
- OTP format checks
- URL slug generation
- Upload content-type and extension helpers
"""

import re
from typing import Optional

from utils.constants import AUDIO_MIME_TYPES, DEFAULT_AUDIO_MIME
from utils.time_utils import epoch_millis


PHONE_PATTERN = re.compile(r"^(\+91)?[6-9]\d{9}$")


def clean_phone(phone: str) -> str:
    """
    Removes spaces and dashes from a phone number.
    """
    return re.sub(r"[\s-]", "", phone or "")


def validate_phone_number(phone: str) -> bool:
    """
    Validates Indian mobile number format.

    Accepts "9876543210" or "+919876543210", with optional spaces/dashes.

    Args:
        phone: Phone number string

    Returns:
        True if valid Indian mobile number
    """
    if not phone:
        return False

    return bool(PHONE_PATTERN.match(clean_phone(phone)))


def normalize_phone(phone: str) -> str:
    """
    Formats a phone number with the +91 country code.

    Args:
        phone: Raw phone number

    Returns:
        "+91XXXXXXXXXX"
    """
    cleaned = clean_phone(phone)
    if cleaned.startswith("+91"):
        return cleaned
    return f"+91{cleaned}"


def format_contact_number(phone: Optional[str]) -> Optional[str]:
    """
    Best-effort normalization for contact numbers typed into a site form.

    Adds +91 to bare 10-digit numbers and leaves anything else untouched.
    """
    if not phone:
        return None
    cleaned = clean_phone(phone)
    if cleaned.startswith("+91"):
        return cleaned
    if len(cleaned) == 10:
        return f"+91{cleaned}"
    return cleaned


def validate_otp_format(otp: str) -> bool:
    """
    Validates OTP format (must be 6 digits).

    Args:
        otp: OTP string

    Returns:
        True if valid 6-digit OTP
    """
    if not otp:
        return False

    return bool(re.match(r"^\d{6}$", otp.strip()))


def generate_slug(name: str, max_length: int = 50) -> str:
    """
    Builds a URL-friendly slug from a site name.

    Lowercases, drops characters other than ASCII word chars, whitespace and
    hyphens, turns whitespace runs into hyphens and collapses repeats.
    Falls back to "shop-<epoch ms>" when nothing usable remains.

    Examples:
        "Vaigai Traders" -> "vaigai-traders"
        "Ram's  Store!" -> "rams-store"
    """
    slug = (name or "").lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug[:max_length]
    return slug or f"shop-{epoch_millis()}"


def file_extension(filename: Optional[str], default: str) -> str:
    """
    Lowercased extension of a filename without the dot.
    """
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].strip().lower()
        if ext:
            return ext
    return default


def audio_mime_type(filename: Optional[str]) -> str:
    """
    MIME type for an audio file based on its extension (defaults to webm).
    """
    return AUDIO_MIME_TYPES.get(file_extension(filename, "webm"), DEFAULT_AUDIO_MIME)


def is_image_content_type(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.startswith("image/")
