"""
app/schemas/auth.py

Purpose: Request/response schemas for account and shop-owner login
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional


class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6, max_length=72, description="bcrypt ignores bytes past 72")
    full_name: str = Field(default="", max_length=120)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("Invalid email address")
        return v

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: str) -> str:
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password is too long")
        return v


class SignInRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str


class UserOut(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None


class SendOtpRequest(BaseModel):
    """Phone is optional here so a missing value yields a 400 with a clear message."""
    phone: Optional[str] = None


class SendOtpResponse(BaseModel):
    success: bool
    message: str
    debug_otp: Optional[str] = None


class VerifyOtpRequest(BaseModel):
    phone: Optional[str] = None
    otp: Optional[str] = None


class VerifyOtpResponse(BaseModel):
    success: bool
    message: str
    shopId: str
