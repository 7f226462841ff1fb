"""API Pydantic models."""

from api.models.schemas import (
    PageResponse,
    CountsResponse,
    StatusHistoryItem,
    TransitionsResponse,
    BulkStatusItem,
    BulkStatusResponse,
    PresetResponse,
    HealthResponse,
)

__all__ = [
    "PageResponse",
    "CountsResponse",
    "StatusHistoryItem",
    "TransitionsResponse",
    "BulkStatusItem",
    "BulkStatusResponse",
    "PresetResponse",
    "HealthResponse",
]
