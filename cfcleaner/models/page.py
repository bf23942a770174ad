"""Single page of a paginated listing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Page:
    """One page of raw resource payloads.

    Attributes:
        resources: Raw payloads on this page
        total_pages: Total page count when the API reports it (page-number APIs)
        total_results: Total item count when the API reports it
    """

    resources: list[dict] = field(default_factory=list)
    total_pages: Optional[int] = None
    total_results: Optional[int] = None
