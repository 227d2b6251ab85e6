"""Configuration settings for the Zinema API."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./zinema.db")

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", "120"))

    # Password recovery
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # Outbound email (Resend)
    RESEND_API_KEY: str = os.getenv("RESEND_API_KEY", "")
    RESEND_FROM: str = os.getenv("RESEND_FROM", "Zinema <no-reply@jonmeister.store>")
    RESEND_API_URL: str = os.getenv("RESEND_API_URL", "https://api.resend.com/emails")

    # HTTP
    CORS_ORIGINS: list[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def verbose_errors(self) -> bool:
        """Whether server-side error logs should carry full tracebacks."""
        return self.DEBUG or self.APP_ENV == "development"

    def validate(self) -> list[str]:
        """Validate settings and return list of problems."""
        errors = []
        if not self.JWT_SECRET_KEY:
            errors.append("JWT_SECRET_KEY is not set - session tokens cannot be issued or verified")
        if not self.RESEND_API_KEY:
            if self.is_production:
                errors.append("RESEND_API_KEY is not set - password reset emails cannot be delivered")
            else:
                errors.append("RESEND_API_KEY is not set - password reset links will be logged to the console")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
