"""Configuration module for Marketplace Admin.

All filter defaults are empty - an empty filter field imposes no constraint.
"""

from .settings import config, DatabaseConfig, ListingConfig, AppConfig, Config
from .constants import (
    # Display labels
    LISTING_TYPE_LABELS,
    LISTING_STATUS_LABELS,
    LISTING_PLAN_LABELS,
    # Option lists
    POPULAR_COUNTRIES,
    SUPPORTED_CURRENCIES,
    # Helper functions
    get_label,
)
from .config_loader import (
    ConfigurationError,
    get_filter_presets,
    get_table_config,
    reload_all_config,
)
from .logging_config import setup_logging, get_logger

__all__ = [
    # Settings
    "config",
    "DatabaseConfig",
    "ListingConfig",
    "AppConfig",
    "Config",
    # Constants
    "LISTING_TYPE_LABELS",
    "LISTING_STATUS_LABELS",
    "LISTING_PLAN_LABELS",
    "POPULAR_COUNTRIES",
    "SUPPORTED_CURRENCIES",
    "get_label",
    # YAML configuration
    "ConfigurationError",
    "get_filter_presets",
    "get_table_config",
    "reload_all_config",
    # Logging
    "setup_logging",
    "get_logger",
]
