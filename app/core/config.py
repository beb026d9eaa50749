"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, secrets, vendor keys, plan rules)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator, ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="voicesite",
        description="MongoDB database name"
    )

    # Sarvam AI (speech-to-text)
    SARVAM_API_KEY: Optional[str] = Field(
        default=None,
        description="Sarvam AI subscription key"
    )
    SARVAM_BASE_URL: str = Field(
        default="https://api.sarvam.ai",
        description="Sarvam AI API base URL"
    )
    SARVAM_STT_MODEL: str = Field(
        default="saarika:v2.5",
        description="Model used for plain transcription"
    )
    SARVAM_TRANSLATE_MODEL: str = Field(
        default="saaras:v2.5",
        description="Model used for transcription + English translation"
    )

    # OpenAI (structured extraction)
    OPENAI_API_KEY: Optional[str] = Field(
        default=None,
        description="OpenAI API key"
    )
    OPENAI_MODEL: str = Field(
        default="gpt-4o-mini",
        description="Chat completion model used for extraction"
    )
    OPENAI_TEMPERATURE: float = Field(
        default=0.3,
        description="Sampling temperature for extraction prompts"
    )

    EXTERNAL_SERVICE_TIMEOUT: float = Field(
        default=60.0,
        description="Timeout in seconds for vendor API calls"
    )

    # Twilio SMS (optional OTP delivery)
    TWILIO_ACCOUNT_SID: Optional[str] = Field(default=None)
    TWILIO_AUTH_TOKEN: Optional[str] = Field(default=None)
    TWILIO_SMS_NUMBER: Optional[str] = Field(
        default=None,
        description="Sender number for OTP SMS, E.164"
    )

    # Public URLs
    APP_URL: str = Field(
        default="http://localhost:8000",
        description="Public base URL of this API (used for file URLs)"
    )

    # Auth
    SECRET_KEY: str = Field(
        default="change-me-in-production",
        description="Secret used to sign access tokens"
    )
    JWT_ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60 * 24,
        description="Lifetime of account bearer tokens"
    )
    SHOP_SESSION_DAYS: int = Field(
        default=7,
        description="Lifetime of the shop-owner cookie session"
    )
    SHOP_AUTH_COOKIE: str = Field(default="shop_auth")

    # OTP
    OTP_EXPIRY_MINUTES: int = Field(default=10)
    RATE_LIMIT_OTP_PER_HOUR: int = Field(
        default=5,
        description="Maximum OTP requests per phone per hour"
    )

    # Uploads
    MAX_IMAGE_SIZE_MB: int = Field(default=5)
    MAX_AUDIO_SIZE_MB: int = Field(default=25)

    # Billing
    PLAN_DURATION_DAYS: int = Field(
        default=30,
        description="Days a recharge keeps a plan active"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api/v1",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v, info: ValidationInfo):
        """Ensure secret key is changed in production."""
        if info.data.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("SECRET_KEY must be changed in production environment")
        return v

    @field_validator("SARVAM_API_KEY", "OPENAI_API_KEY")
    @classmethod
    def validate_vendor_keys(cls, v, info: ValidationInfo):
        """Ensure vendor keys are set in production."""
        if info.data.get("ENVIRONMENT") == "production" and not v:
            raise ValueError(f"{info.field_name} is required in production environment")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def files_base_url(self) -> str:
        """Public prefix for stored objects."""
        return f"{self.APP_URL.rstrip('/')}{self.API_PREFIX}/files"

    @property
    def sms_configured(self) -> bool:
        return bool(
            self.TWILIO_ACCOUNT_SID
            and self.TWILIO_AUTH_TOKEN
            and self.TWILIO_SMS_NUMBER
        )


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.MONGODB_DB_NAME:
        errors.append("MONGODB_DB_NAME is required")

    if settings.OTP_EXPIRY_MINUTES <= 0:
        errors.append("OTP_EXPIRY_MINUTES must be positive")

    # Production-specific validations
    if settings.is_production:
        if not settings.SARVAM_API_KEY:
            errors.append("SARVAM_API_KEY is required in production")
        if not settings.OPENAI_API_KEY:
            errors.append("OPENAI_API_KEY is required in production")
        if settings.APP_URL.startswith("http://localhost"):
            errors.append("APP_URL must point at the public host in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
