"""
Pagination helpers shared by the user and task listings.

Both listings are ordered newest-first by ``created_at`` with ties broken by
ascending ``id``, so a window computed here is stable from one page to the
next. Everything in this module is a pure function of its inputs.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from app.validation import is_row_id, parse_int

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def _positive_int(value: Any) -> int | None:
    """Return *value* as a positive int in the INTEGER range, or None."""
    parsed = parse_int(value)
    if parsed is None or not is_row_id(parsed):
        return None
    return parsed


@dataclass(frozen=True)
class PageRequest:
    """A validated page/limit pair."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_params(
        cls,
        page: Any = None,
        limit: Any = None,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int | None = None,
    ) -> "PageRequest":
        """
        Build a request from raw query values.

        Absent, non-numeric, zero, negative or out-of-range values fall back
        to the defaults. A limit above ``max_limit`` is clamped to it when a
        maximum is configured.

        Args:
            page: Raw ``page`` query value.
            limit: Raw ``limit`` query value.
            default_limit: Limit used when ``limit`` is missing or invalid.
            max_limit: Optional upper bound for ``limit``.

        Returns:
            A PageRequest with a page >= 1 and a limit >= 1.
        """
        parsed_page = _positive_int(page) or DEFAULT_PAGE
        parsed_limit = _positive_int(limit) or default_limit
        if max_limit is not None:
            parsed_limit = min(parsed_limit, max_limit)
        return cls(page=parsed_page, limit=parsed_limit)


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed for *total* rows; 0 for an empty collection."""
    if total <= 0:
        return 0
    return math.ceil(total / limit)


@dataclass
class Page(Generic[T]):
    """One window of a collection plus the size of the whole collection."""

    items: list[T]
    total: int
    request: PageRequest = field(default_factory=PageRequest)

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.request.limit)

    def metadata(self) -> dict[str, int]:
        return {
            "page": self.request.page,
            "limit": self.request.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }
