"""
Core configuration settings for the Storefront API
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # App Config
    APP_NAME: str = "DigiStore"
    APP_ENV: str = "development"
    SECRET_KEY: str
    DEBUG: bool = True

    # Database
    DATABASE_URL: str
    AUTO_CREATE_TABLES: bool = False  # create_all on startup, for local dev and tests

    # JWT
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # CORS
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert CORS_ORIGINS string to list"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        origins = [origin.strip() for origin in self.CORS_ORIGINS.split(",")]
        # Ensure local development ports are allowed if DEBUG is True
        if self.DEBUG:
            for dev_origin in ["http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:3000", "http://127.0.0.1:5173"]:
                if dev_origin not in origins:
                    origins.append(dev_origin)
        return origins

    # Affiliate program
    REFERRAL_COOKIE_NAME: str = "ds_ref_code"
    REFERRAL_COOKIE_MAX_AGE_DAYS: int = 30
    AFFILIATE_CODE_LENGTH: int = 6
    MIN_WITHDRAWAL_AMOUNT: int = 100000  # Rupiah

    @property
    def referral_cookie_max_age(self) -> int:
        return self.REFERRAL_COOKIE_MAX_AGE_DAYS * 24 * 60 * 60

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# Create global settings instance
settings = Settings()
