"""Configuration settings for authgate."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./authgate.db")

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", secrets.token_urlsafe(32))
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", str(7 * 24 * 60)))

    # OTP / reset token windows
    OTP_EXPIRES_MINUTES: int = int(os.getenv("OTP_EXPIRES_MINUTES", "10"))
    SIGNIN_OTP_EXPIRES_MINUTES: int = int(os.getenv("SIGNIN_OTP_EXPIRES_MINUTES", "5"))
    RESET_TOKEN_EXPIRES_MINUTES: int = int(os.getenv("RESET_TOKEN_EXPIRES_MINUTES", "60"))

    # Email
    EMAIL_HOST: str = os.getenv("EMAIL_HOST", "")
    EMAIL_PORT: int = int(os.getenv("EMAIL_PORT", "587"))
    EMAIL_USE_TLS: bool = _env_bool("EMAIL_USE_TLS", "true")
    EMAIL_USER: str = os.getenv("EMAIL_USER", "")
    EMAIL_PASSWORD: str = os.getenv("EMAIL_PASSWORD", "")
    EMAIL_FROM: str = os.getenv("EMAIL_FROM", "noreply@authgate.local")

    # Rate limits (slowapi notation)
    RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "100/15minutes")
    RATE_LIMIT_AUTH: str = os.getenv("RATE_LIMIT_AUTH", "5/15minutes")
    RATE_LIMIT_OTP: str = os.getenv("RATE_LIMIT_OTP", "3/15minutes")
    RATE_LIMIT_PASSWORD_RESET: str = os.getenv("RATE_LIMIT_PASSWORD_RESET", "3/hour")

    # Upload
    MAX_DISPLAY_PICTURE_MB: int = int(os.getenv("MAX_DISPLAY_PICTURE_MB", "10"))

    # URLs
    CORS_ORIGIN: str = os.getenv("CORS_ORIGIN", "http://localhost:3000")
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = _env_bool("DEBUG", "false")
    EXPOSE_SIGNIN_OTP: bool = _env_bool("EXPOSE_SIGNIN_OTP", "false" if APP_ENV == "production" else "true")

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if not os.getenv("JWT_SECRET_KEY"):
            errors.append("JWT_SECRET_KEY is not set - using auto-generated key (not persistent across restarts)")
        if not self.EMAIL_HOST:
            errors.append("EMAIL_HOST is not set - emails will be logged instead of sent")
        if self.APP_ENV == "production" and self.EXPOSE_SIGNIN_OTP:
            errors.append("EXPOSE_SIGNIN_OTP is enabled in production - signin responses leak the OTP")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
