"""
Configuration settings for the Manglanam storefront
Handles environment variables and application settings
"""
from typing import Annotated, Optional, List
from pydantic_settings import BaseSettings, NoDecode
from pydantic import field_validator


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Manglanam Storefront"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Database
    DATABASE_URL: str = "sqlite:///./storefront.db"

    # Razorpay
    RAZORPAY_KEY_ID: Optional[str] = None
    RAZORPAY_KEY_SECRET: Optional[str] = None
    RAZORPAY_API_BASE: str = "https://api.razorpay.com"
    RAZORPAY_CHECKOUT_URL: str = "https://checkout.razorpay.com/v1/checkout.js"
    RAZORPAY_TIMEOUT_SECONDS: float = 15.0

    # Checkout branding (cosmetic, forwarded to the widget)
    STORE_NAME: str = "Manglanam Spices"
    STORE_LOGO_URL: str = "/logo.png"
    STORE_ADDRESS_NOTE: str = "Manglanam Naturals Corporate Office"
    THEME_COLOR: str = "#E11D48"
    CURRENCY: str = "INR"

    # CORS: comma-separated in the environment, not JSON
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields from .env file


# Create settings instance
settings = Settings()


if settings.ENVIRONMENT == "development":
    settings.DEBUG = True


def validate_settings():
    """Validate critical settings"""
    issues = []

    if not settings.RAZORPAY_KEY_ID:
        issues.append("RAZORPAY_KEY_ID must be set in production")
    if not settings.RAZORPAY_KEY_SECRET:
        issues.append("RAZORPAY_KEY_SECRET must be set in production")
    if settings.DATABASE_URL.startswith("sqlite"):
        issues.append("DATABASE_URL must point at Postgres in production")

    if issues:
        raise ValueError(f"Configuration issues: {', '.join(issues)}")


# Auto-validate on import in production
if settings.ENVIRONMENT == "production":
    validate_settings()
