"""
Application configuration and environment settings.
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "FairFare"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Remote document store
    DATABASE_URL: str = "sqlite:///./fairfare.db"
    DB_ECHO: bool = False

    # Local cache (survives restarts, separate from the remote store)
    LOCAL_CACHE_URL: str = "sqlite:///./fairfare_cache.db"

    # JWT
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:5173"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # Gemini (recommendations, packing lists, fair-price checks)
    GEMINI_API_KEY: str = ""
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta/models"
    GEMINI_MODEL: str = "gemini-flash-latest"
    LLM_TIMEOUT: float = 30.0

    # Exchange Rate (no key required)
    FX_API_URL: str = "https://open.er-api.com/v6/latest"
    FX_TIMEOUT: float = 10.0

    # Budgeting
    DEFAULT_BUDGET: int = 5000  # Budget shown when no trip is selected
    CURRENCY_SYMBOL: str = "₹"

    # Sync
    WRITE_QUEUE_SIZE: int = 100  # Pending remote writes before new ones are dropped
    RESTORE_LAST_VIEW: bool = False  # Dashboard is the default view after sign-in

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
