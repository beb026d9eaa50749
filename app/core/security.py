"""
app/core/security.py

Purpose: Authentication primitives

- Password hashing (bcrypt)
- Signed access tokens (JWT via python-jose)
- FastAPI dependencies resolving the current account (bearer token)
  and the current shop owner (cookie session)
"""

from datetime import timedelta
from typing import Any, Dict, Optional

import bcrypt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from utils.time_utils import utcnow

TOKEN_KIND_ACCOUNT = "account"
TOKEN_KIND_SHOP_OWNER = "shop_owner"

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_token(claims: Dict[str, Any], expires_in: timedelta) -> str:
    """
    Signs a JWT carrying the given claims plus iat/exp.
    """
    now = utcnow()
    payload = {**claims, "iat": now, "exp": now + expires_in}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, kind: str) -> Dict[str, Any]:
    """
    Verifies signature, expiry and token kind.

    Raises:
        AuthenticationError: on any failure
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise AuthenticationError("Unauthorized: Invalid token") from e

    if payload.get("kind") != kind:
        raise AuthenticationError("Unauthorized: Invalid token")
    return payload


def create_access_token(user_id: str, email: str) -> str:
    return create_token(
        {"sub": user_id, "email": email, "kind": TOKEN_KIND_ACCOUNT},
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_shop_owner_token(owner_id: str, shop_id: str) -> str:
    return create_token(
        {"sub": owner_id, "shop_id": shop_id, "kind": TOKEN_KIND_SHOP_OWNER},
        timedelta(days=settings.SHOP_SESSION_DAYS),
    )


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Resolves the account id from an "Authorization: Bearer <jwt>" header.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Unauthorized: No token provided")

    payload = decode_token(credentials.credentials, TOKEN_KIND_ACCOUNT)
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Unauthorized: Invalid token")
    return user_id


async def get_current_shop_owner(request: Request) -> Dict[str, str]:
    """
    Resolves {"owner_id", "shop_id"} from the shop-owner session cookie.
    """
    token = request.cookies.get(settings.SHOP_AUTH_COOKIE)
    if not token:
        raise AuthenticationError("Unauthorized")

    payload = decode_token(token, TOKEN_KIND_SHOP_OWNER)
    if not payload.get("sub") or not payload.get("shop_id"):
        raise AuthenticationError("Unauthorized")
    return {"owner_id": payload["sub"], "shop_id": payload["shop_id"]}
