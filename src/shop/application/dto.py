"""Data Transfer Objects: plain containers that cross layer boundaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from shop.domain.model.product import Product


@dataclass(frozen=True)
class ProductPage:
    """Output: one page of the filtered and sorted product listing."""

    payload: list[Product]
    total_pages: int
    page: int
    has_prev_page: bool
    has_next_page: bool
    prev_page: int | None
    next_page: int | None
    prev_link: str | None
    next_link: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "success",
            "payload": [p.to_record() for p in self.payload],
            "totalPages": self.total_pages,
            "page": self.page,
            "hasPrevPage": self.has_prev_page,
            "hasNextPage": self.has_next_page,
            "prevPage": self.prev_page,
            "nextPage": self.next_page,
            "prevLink": self.prev_link,
            "nextLink": self.next_link,
        }
