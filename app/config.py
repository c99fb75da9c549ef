# ============================================================================
# FILE: app/config.py
# ============================================================================
from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application configuration using Pydantic BaseSettings"""

    # App settings
    APP_NAME: str = "CineTrack"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database (required)
    DATABASE_URL: str

    # Redis cache for provider responses; empty disables caching
    REDIS_URL: str = ""
    CACHE_EXPIRE_SECONDS: int = 3600

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    PASSWORD_HASH_ROUNDS: int = 12

    # TMDB metadata provider
    TMDB_API_KEY: str
    TMDB_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_LANGUAGE: str = "en-US"
    TMDB_TIMEOUT_SECONDS: float = 10.0
    TMDB_SEARCH_TIMEOUT_SECONDS: float = 5.0
    TRENDING_PAGES: int = 2
    TRENDING_PAGE_DELAY_SECONDS: float = 1.0

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    @field_validator("DATABASE_URL", "SECRET_KEY", "TMDB_API_KEY")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must be set to a non-empty value")
        return value

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
