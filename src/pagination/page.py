"""Page value and the fetcher interface consumed by the controller."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from src.filters.filter_state import FilterStateBase


@dataclass(frozen=True)
class Page:
    """One page of results plus the cursor for the next page (None at the end)."""
    records: List[Dict[str, Any]] = field(default_factory=list)
    next_cursor: Optional[str] = None

    def __len__(self) -> int:
        return len(self.records)


class PageFetcher(Protocol):
    """Anything that can fetch a page for a committed filter."""

    async def fetch_page(
        self,
        filter_state: FilterStateBase,
        page_size: int,
        cursor: Optional[str],
    ) -> Page:
        ...
