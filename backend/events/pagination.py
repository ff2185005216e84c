# backend/events/pagination.py
"""Records-per-page options and page/offset arithmetic."""

from __future__ import annotations

from dataclasses import dataclass
from os import getenv
from typing import Any
import logging
import math

logger = logging.getLogger(__name__)

PER_PAGE_OPTIONS: tuple[int, ...] = (10, 20, 50, 100)

_default = int(getenv("DEFAULT_PER_PAGE", "20"))
if _default not in PER_PAGE_OPTIONS:
    raise ValueError(f"DEFAULT_PER_PAGE must be one of {PER_PAGE_OPTIONS}, got {_default}")
DEFAULT_PER_PAGE = _default
DEFAULT_PER_PAGE_INDEX = PER_PAGE_OPTIONS.index(DEFAULT_PER_PAGE)


def resolve_per_page_index(selected_index: Any) -> int:
    """Option index to use; anything unusable falls back to the default."""
    if selected_index is None or selected_index == "":
        return DEFAULT_PER_PAGE_INDEX
    try:
        idx = int(selected_index)
    except (TypeError, ValueError):
        idx = -1
    if not 0 <= idx < len(PER_PAGE_OPTIONS):
        logger.warning("Ignoring per-page index %r", selected_index)
        return DEFAULT_PER_PAGE_INDEX
    return idx


def resolve_per_page(selected_index: Any) -> int:
    return PER_PAGE_OPTIONS[resolve_per_page_index(selected_index)]


@dataclass(frozen=True)
class Pagination:
    page: int
    per_page: int
    total_rows: int
    total_pages: int
    offset: int

    @property
    def showing(self) -> str:
        if not self.total_rows:
            return "Showing 0 records."
        first = self.offset + 1
        last = min(self.offset + self.per_page, self.total_rows)
        return f"Showing {first} to {last} of {self.total_rows} records."

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def as_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "per_page": self.per_page,
            "total_rows": self.total_rows,
            "total_pages": self.total_pages,
            "offset": self.offset,
            "showing": self.showing,
        }


def build_pagination(total: int, page: Any, per_page: int) -> Pagination:
    """Clamp ``page`` into ``1..total_pages`` and compute the row offset."""
    total_pages = max(1, math.ceil(total / per_page))
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    page = min(max(page, 1), total_pages)
    return Pagination(
        page=page,
        per_page=per_page,
        total_rows=total,
        total_pages=total_pages,
        offset=(page - 1) * per_page,
    )
