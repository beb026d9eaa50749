"""
app/services/user_service.py

Purpose: Account and profile management

- Sign up (user + default subscription + empty profile) and sign in
- Profile read / upsert, kept in sync with the account name
"""

import uuid
from typing import Any, Dict, Optional

from app.core.exceptions import AuthenticationError, ConflictError, ResourceNotFoundError
from app.core.logging import get_logger
from app.core.security import hash_password, verify_password
from app.db.mongo import get_profiles_collection, get_users_collection
from app.services import subscription_service
from utils.time_utils import utcnow

logger = get_logger(__name__)

PROFILE_FIELDS = ("username", "full_name", "phone_number", "contact_email", "avatar_url")


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": user["id"],
        "email": user["email"],
        "full_name": user.get("full_name"),
    }


async def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    users = get_users_collection()
    return await users.find_one({"email": email.strip().lower()}, {"_id": 0})


async def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    """
    Retrieves a user by ID.

    Args:
        user_id: Account id

    Returns:
        User document or None if not found
    """
    users = get_users_collection()
    return await users.find_one({"id": user_id}, {"_id": 0})


async def create_user(email: str, password: str, full_name: str = "") -> Dict[str, Any]:
    """
    Registers an account with a default subscription and an empty profile.

    Raises:
        ConflictError: Email already registered
    """
    email = email.strip().lower()
    if await get_user_by_email(email):
        raise ConflictError("An account with this email already exists")

    now = utcnow()
    user = {
        "id": str(uuid.uuid4()),
        "email": email,
        "password_hash": hash_password(password),
        "full_name": full_name,
        "created_at": now,
        "last_login_at": None,
    }
    await get_users_collection().insert_one(dict(user))

    await subscription_service.get_or_create_subscription(user["id"])
    await get_profiles_collection().insert_one({
        "id": user["id"],
        "full_name": full_name,
        "contact_email": email,
        "updated_at": now,
    })

    logger.info(f"New account created: {user['id']}")
    return user


async def authenticate(email: str, password: str) -> Dict[str, Any]:
    """
    Raises:
        AuthenticationError: Unknown email or wrong password
    """
    user = await get_user_by_email(email)
    if not user or not verify_password(password, user.get("password_hash", "")):
        raise AuthenticationError("Invalid email or password")

    await get_users_collection().update_one(
        {"id": user["id"]},
        {"$set": {"last_login_at": utcnow()}}
    )
    return user


async def get_profile(user_id: str) -> Dict[str, Any]:
    """
    Profile fields with empty strings for anything unset.
    """
    profile = await get_profiles_collection().find_one({"id": user_id}, {"_id": 0}) or {}
    return {field: profile.get(field) or "" for field in PROFILE_FIELDS}


async def update_profile(user_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Upserts the given profile fields. A changed full_name is copied to the account.
    """
    user = await get_user_by_id(user_id)
    if not user:
        raise ResourceNotFoundError("User not found")

    changes = {
        field: updates[field]
        for field in PROFILE_FIELDS
        if updates.get(field) is not None
    }
    changes["updated_at"] = utcnow()

    await get_profiles_collection().update_one(
        {"id": user_id},
        {"$set": changes},
        upsert=True
    )

    if "full_name" in changes:
        await get_users_collection().update_one(
            {"id": user_id},
            {"$set": {"full_name": changes["full_name"]}}
        )

    logger.info(f"Profile updated for {user_id}")
    return await get_profile(user_id)
