"""Pydantic schemas for API responses."""

from pydantic import BaseModel, Field
from typing import Any, Optional


class PageResponse(BaseModel):
    """One page of records with the cursor for the next page."""
    records: list[dict[str, Any]]
    next_cursor: Optional[str] = None
    has_more: bool
    active_filter_count: int
    filters: dict[str, Any] = Field(default_factory=dict, description="Active filters as parsed")


class CountsResponse(BaseModel):
    """Record counts per value of a grouping field (tab badges)."""
    group_by: str
    counts: dict[str, int]
    total: int


class StatusHistoryItem(BaseModel):
    status: str
    reason: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Any


class TransitionsResponse(BaseModel):
    id: str
    status: str
    transitions: list[str]


class BulkStatusItem(BaseModel):
    id: str
    success: bool
    error: Optional[str] = None


class BulkStatusResponse(BaseModel):
    results: list[BulkStatusItem]
    succeeded: int
    failed: int


class PresetResponse(BaseModel):
    """A built-in filter preset."""
    id: str
    name: str
    description: Optional[str] = None
    filters: dict[str, Any]
    is_default: bool = False
    is_built_in: bool = True
    active_filter_count: int = 0
    query_params: dict[str, str] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: str
    database: str
    schema_version: Optional[str] = None
    tables: Optional[dict[str, int]] = None
    error: Optional[str] = None
