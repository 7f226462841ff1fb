"""FastAPI application settings."""

from pathlib import Path
from pydantic_settings import BaseSettings
from functools import lru_cache
import os


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("MARKETPLACE_CORS_ORIGINS", "")
    if cors_env:
        return [origin.strip() for origin in cors_env.split(",")]
    # Default development origins
    return ["http://localhost:3000", "http://localhost:5173"]


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # App info
    app_name: str = "Marketplace Admin API"
    version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Database
    database_path: Path = Path(__file__).parent.parent / "data" / "marketplace.duckdb"

    # CORS - configurable via environment variable
    cors_origins: list[str] = _parse_cors_origins()

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Cache
    cache_ttl_seconds: int = 300

    # Listing workflow
    feature_duration_days: int = 30

    class Config:
        env_prefix = "MARKETPLACE_"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
