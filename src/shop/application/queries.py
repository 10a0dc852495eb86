"""Normalization of raw product-listing parameters.

Query strings arrive as text; this turns them into a typed ProductQuery.
Invalid paging values fall back to the defaults instead of failing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping
from urllib.parse import urlencode

DEFAULT_LIMIT = 10
DEFAULT_PAGE = 1


class SortOrder(Enum):
    NONE = "none"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"


class Availability(Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


_SORT_ALIASES = {
    "asc": SortOrder.PRICE_ASC,
    "price-asc": SortOrder.PRICE_ASC,
    "desc": SortOrder.PRICE_DESC,
    "price-desc": SortOrder.PRICE_DESC,
}


@dataclass(frozen=True)
class ProductFilter:
    category: str | None = None
    availability: Availability | None = None


@dataclass(frozen=True)
class ProductQuery:
    """Filter, sort and paging options for the product listing."""

    filter: ProductFilter = ProductFilter()
    sort: SortOrder = SortOrder.NONE
    limit: int = DEFAULT_LIMIT
    page: int = DEFAULT_PAGE

    def link_for(self, page: int) -> str:
        """Relative query string pointing at *page* with the same options."""
        params: list[tuple[str, object]] = [("limit", self.limit), ("page", page)]
        if self.sort is not SortOrder.NONE:
            params.append(("sort", self.sort.value))
        if self.filter.availability is not None:
            params.append(("query", self.filter.availability.value))
        elif self.filter.category is not None:
            params.append(("query", self.filter.category))
        return "?" + urlencode(params)


def _positive_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if value > 0 else default


def handle_product_queries(raw: Mapping[str, str] | None) -> ProductQuery:
    """Build a ProductQuery from raw query parameters."""
    raw = raw or {}

    sort = _SORT_ALIASES.get(str(raw.get("sort", "")).strip().lower(), SortOrder.NONE)

    query = str(raw.get("query") or "").strip()
    if query.lower() in {a.value for a in Availability}:
        product_filter = ProductFilter(availability=Availability(query.lower()))
    elif query:
        product_filter = ProductFilter(category=query)
    else:
        product_filter = ProductFilter()

    return ProductQuery(
        filter=product_filter,
        sort=sort,
        limit=_positive_int(raw.get("limit"), DEFAULT_LIMIT),
        page=_positive_int(raw.get("page"), DEFAULT_PAGE),
    )
