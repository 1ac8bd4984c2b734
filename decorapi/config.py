from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List, Optional
from urllib.parse import quote_plus


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="decorapi/.env",
        env_file_encoding="utf-8",
        extra="allow",
    )
    # Application
    APP_NAME: str = "HolidayHome AI API"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USERNAME: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DATABASE: str = "postgres"
    POSTGRES_SCHEMA: str = "public"

    # Full URL (Railway/Heroku style) takes precedence over POSTGRES_* parts
    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    @property
    def database_url(self) -> str:
        """Return DATABASE_URL or construct it from individual components"""

        if self.DATABASE_URL:
            # Railway injects postgres:// which SQLAlchemy no longer accepts
            if self.DATABASE_URL.startswith("postgres://"):
                return self.DATABASE_URL.replace(
                    "postgres://", "postgresql+psycopg2://", 1
                )
            return self.DATABASE_URL

        encoded_password = quote_plus(self.POSTGRES_PASSWORD)
        return f"postgresql+psycopg2://{self.POSTGRES_USERNAME}:{encoded_password}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DATABASE}"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["capacitor://localhost", "ionic://localhost"]

    # Generation quota (server is the single source of truth for these)
    INITIAL_FREE_GENERATIONS: int = 3
    REFERRAL_CLAIMER_REWARD: int = 3
    REFERRAL_REFERRER_REWARD: int = 3

    # Referral codes
    REFERRAL_CODE_LENGTH: int = 6
    REFERRAL_CODE_MAX_ATTEMPTS: int = 10
    REFERRAL_BASE_URL: str = "https://holidayhomeai.up.railway.app/r/"

    # In-app purchases: product id -> generations credited per transaction
    PRODUCT_CREDIT_MAP: Dict[str, int] = {"holiday_basic_pack": 10}

    # Image generation (Gemini)
    GEMINI_API_KEY: str = ""
    GEMINI_API_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_IMAGE_MODEL: str = "gemini-2.5-flash-image"
    GEMINI_VISION_MODEL: str = "gemini-2.5-flash"
    GENERATION_TIMEOUT_SECONDS: float = 120.0

    # Affiliate products
    AMAZON_AFFILIATE_TAG: str = ""
    MIN_PRODUCT_SUGGESTIONS: int = 4
    MAX_PRODUCT_SUGGESTIONS: int = 6


settings = Settings()
