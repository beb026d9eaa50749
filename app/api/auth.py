"""
app/api/auth.py

Purpose: Authentication endpoints

- Account sign up / sign in (bearer JWT)
- Shop-owner phone login with OTP (httpOnly cookie session)
"""

from fastapi import APIRouter, Depends, Response

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.logging import get_logger
from app.core.security import create_access_token, create_shop_owner_token, get_current_user_id
from app.schemas.auth import (
    SendOtpRequest,
    SendOtpResponse,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
    UserOut,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from app.schemas.response import SuccessResponse
from app.services import otp_service, user_service
from utils.constants import MSG_LOGIN_SUCCESS

logger = get_logger(__name__)
router = APIRouter()


@router.post("/signup", response_model=TokenResponse, status_code=201)
async def signup(payload: SignUpRequest):
    user = await user_service.create_user(payload.email, payload.password, payload.full_name)
    return TokenResponse(
        access_token=create_access_token(user["id"], user["email"]),
        user_id=user["id"]
    )


@router.post("/signin", response_model=TokenResponse)
async def signin(payload: SignInRequest):
    user = await user_service.authenticate(payload.email, payload.password)
    return TokenResponse(
        access_token=create_access_token(user["id"], user["email"]),
        user_id=user["id"]
    )


@router.get("/me", response_model=UserOut)
async def me(user_id: str = Depends(get_current_user_id)):
    user = await user_service.get_user_by_id(user_id)
    if not user:
        raise AuthenticationError("Unauthorized: Invalid token")
    return user_service.public_user(user)


@router.post("/send-otp", response_model=SendOtpResponse, response_model_exclude_none=True)
async def send_otp(payload: SendOtpRequest):
    """
    Sends a login code to a registered shop owner's phone.
    The code is echoed back as debug_otp only in development.
    """
    result = await otp_service.send_otp(payload.phone)
    return SendOtpResponse(
        success=True,
        message=result["message"],
        debug_otp=result["otp"] if settings.is_development else None
    )


@router.post("/verify-otp", response_model=VerifyOtpResponse)
async def verify_otp(payload: VerifyOtpRequest, response: Response):
    """
    Verifies the code and starts a shop-owner session cookie.
    """
    owner = await otp_service.verify_otp(payload.phone, payload.otp)

    response.set_cookie(
        key=settings.SHOP_AUTH_COOKIE,
        value=create_shop_owner_token(owner["owner_id"], owner["shop_id"]),
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        max_age=settings.SHOP_SESSION_DAYS * 24 * 60 * 60,
        path="/"
    )

    logger.info(f"Shop session started for shop {owner['shop_id']}")
    return VerifyOtpResponse(success=True, message=MSG_LOGIN_SUCCESS, shopId=owner["shop_id"])


@router.post("/logout-shop", response_model=SuccessResponse)
async def logout_shop(response: Response):
    response.delete_cookie(settings.SHOP_AUTH_COOKIE, path="/")
    return SuccessResponse(success=True, message="Logged out")
