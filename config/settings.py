"""Application settings and configuration."""

from pathlib import Path
from dataclasses import dataclass, field
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


@dataclass
class DatabaseConfig:
    """Database configuration settings."""

    path: Path = field(
        default_factory=lambda: Path(
            os.getenv("MARKETPLACE_DB_PATH", str(PROJECT_ROOT / "data" / "marketplace.duckdb"))
        )
    )
    read_only: bool = False
    memory_limit: str = "2GB"
    threads: int = -1  # Use all available threads


@dataclass
class ListingConfig:
    """Listing defaults."""

    default_currency: str = field(
        default_factory=lambda: os.getenv("DEFAULT_CURRENCY", "INR")
    )


@dataclass
class AppConfig:
    """Application configuration settings."""

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


@dataclass
class Config:
    """Main configuration container."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    listings: ListingConfig = field(default_factory=ListingConfig)
    app: AppConfig = field(default_factory=AppConfig)


# Global config instance
config = Config()
