"""Filter presets API router.

Read-only access to the built-in listing filter presets.
"""

from fastapi import APIRouter, HTTPException

from api.models.schemas import PresetResponse
from src.filters.presets import FilterPreset, get_preset as find_preset, list_presets as all_presets

router = APIRouter()


def _to_response(preset: FilterPreset) -> dict:
    return {
        **preset.to_dict(),
        "active_filter_count": preset.filters.active_filter_count,
        "query_params": preset.filters.to_query_params(),
    }


@router.get("", response_model=list[PresetResponse])
async def list_presets():
    """List built-in filter presets, default first."""
    return [_to_response(p) for p in all_presets()]


@router.get("/{preset_id}", response_model=PresetResponse)
async def get_preset(preset_id: str):
    """Get a single preset by ID."""
    preset = find_preset(preset_id)
    if preset is None:
        raise HTTPException(status_code=404, detail="Preset not found")
    return _to_response(preset)
