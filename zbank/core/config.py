# zbank/core/config.py
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    PROJECT_NAME: str = "ZBank"
    API_V1_STR: str = "/api/v1"

    # Runtime
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./zbank.db"

    # Security
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # OTP Settings
    OTP_EXPIRY_MINUTES: int = 5
    OTP_LENGTH: int = 6
    # When enabled, generating a code marks older unused codes for the
    # same (email, purpose) as used.
    OTP_INVALIDATE_PREVIOUS: bool = False

    # Cards
    CARD_ONBOARDING_BALANCE: float = 10000.00
    CARD_VALIDITY_YEARS: int = 3

    # Email Configuration
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_SSL: bool = False
    SMTP_TIMEOUT: int = 10
    FROM_EMAIL: Optional[str] = None

    # CORS Origins
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()
