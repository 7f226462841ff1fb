"""Built-in listing filter presets.

Presets mirror the tabs of the listings console (all, pending review,
featured, drafts). Definitions live in ``config/presets.yaml``.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from config.config_loader import get_filter_presets
from config.logging_config import get_logger
from src.exceptions import InvalidFilterError
from src.filters.filter_state import ListingFilterState

logger = get_logger("filters.presets")


@dataclass(frozen=True)
class FilterPreset:
    """A saved filter configuration."""

    id: str
    name: str
    filters: ListingFilterState
    description: Optional[str] = None
    is_default: bool = False
    is_built_in: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "filters": self.filters.to_dict(),
            "is_default": self.is_default,
            "is_built_in": self.is_built_in,
        }

    @classmethod
    def from_config(cls, preset_id: str, data: Dict[str, Any]) -> "FilterPreset":
        """Create from a presets.yaml entry."""
        return cls(
            id=preset_id,
            name=data.get("name", preset_id),
            description=data.get("description"),
            filters=ListingFilterState.from_dict(data.get("filters") or {}),
            is_default=bool(data.get("is_default", False)),
        )


def get_builtin_presets() -> Dict[str, FilterPreset]:
    """
    Get the built-in presets keyed by id.

    Entries whose filters do not parse are skipped and logged.
    """
    presets: Dict[str, FilterPreset] = {}
    for preset_id, data in get_filter_presets().get_all_presets().items():
        try:
            presets[preset_id] = FilterPreset.from_config(preset_id, data)
        except InvalidFilterError as e:
            logger.error(f"Skipping preset '{preset_id}': {e}")
    return presets


def list_presets() -> List[FilterPreset]:
    """Get presets with the default first."""
    presets = list(get_builtin_presets().values())
    return sorted(presets, key=lambda p: not p.is_default)


def get_preset(preset_id: str) -> Optional[FilterPreset]:
    """Get a preset by id, or None if it does not exist."""
    return get_builtin_presets().get(preset_id)


def get_default_preset() -> Optional[FilterPreset]:
    """Get the preset marked as default."""
    for preset in list_presets():
        if preset.is_default:
            return preset
    return None
