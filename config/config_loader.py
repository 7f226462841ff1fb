"""YAML Configuration Loader for Marketplace Admin.

Loads and caches configuration from YAML files with fallback to defaults.
Provides type-safe access to configuration values.
"""

from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field
from functools import lru_cache
import yaml

# Get config directory
CONFIG_DIR = Path(__file__).parent


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""

    pass


def _load_yaml_file(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of YAML file in config directory

    Returns:
        Parsed YAML content as dictionary

    Raises:
        ConfigurationError: If file cannot be loaded
    """
    filepath = CONFIG_DIR / filename
    if not filepath.exists():
        raise ConfigurationError(f"Configuration file not found: {filepath}")

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing {filename}: {e}")
    except IOError as e:
        raise ConfigurationError(f"Error reading {filename}: {e}")


@lru_cache(maxsize=1)
def load_presets() -> Dict[str, Any]:
    """Load presets.yaml configuration."""
    try:
        return _load_yaml_file("presets.yaml")
    except ConfigurationError:
        return {
            "presets": {
                "all_listings": {
                    "name": "All Listings",
                    "description": "Every listing that has not been deleted",
                    "filters": {},
                    "is_default": True,
                }
            }
        }


@lru_cache(maxsize=1)
def load_ui_config() -> Dict[str, Any]:
    """Load ui_config.yaml configuration."""
    try:
        return _load_yaml_file("ui_config.yaml")
    except ConfigurationError:
        return {
            "tables": {"pagination": {"default_page_size": 10}},
        }


def clear_config_cache() -> None:
    """Clear all cached configuration data."""
    load_presets.cache_clear()
    load_ui_config.cache_clear()


@dataclass
class FilterPresets:
    """Filter preset configuration accessor."""

    _data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        presets = load_presets()
        self._data = presets.get("presets", {})

    def get_all_presets(self) -> Dict[str, Dict[str, Any]]:
        """Get all presets."""
        return self._data


@dataclass
class TableConfig:
    """Table display configuration accessor."""

    _data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        ui_config = load_ui_config()
        self._data = ui_config.get("tables", {})

    @property
    def default_page_size(self) -> int:
        """Get default pagination page size."""
        return self._data.get("pagination", {}).get("default_page_size", 10)

    @property
    def max_page_size(self) -> int:
        """Get maximum allowed page size."""
        return self._data.get("pagination", {}).get("max_page_size", 100)


# Singletons, created on first access
_filter_presets: Optional[FilterPresets] = None
_table_config: Optional[TableConfig] = None


def get_filter_presets() -> FilterPresets:
    """Get filter presets configuration."""
    global _filter_presets
    if _filter_presets is None:
        _filter_presets = FilterPresets()
    return _filter_presets


def get_table_config() -> TableConfig:
    """Get table configuration."""
    global _table_config
    if _table_config is None:
        _table_config = TableConfig()
    return _table_config


def reload_all_config() -> None:
    """Reload all configuration from YAML files."""
    global _filter_presets, _table_config

    clear_config_cache()

    _filter_presets = None
    _table_config = None
