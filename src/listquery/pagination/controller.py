"""Pagination – page/limit/offset bookkeeping for one list view."""
from __future__ import annotations

import math

from listquery.kernel.errors import ValidationError


class PaginationController:
    """1-indexed page cursor.

    ``offset`` is always ``(page - 1) * limit``. :meth:`reset` returns to page
    1 and leaves the limit alone; the orchestrator calls it whenever committed
    criteria change so an old page number is never paired with new criteria.
    """

    def __init__(self, limit: int = 10, page: int = 1, *, max_limit: int = 1000) -> None:
        self._max_limit = max_limit
        self._limit = self._check_limit(limit)
        self._page = self._check_page(page)

    @property
    def page(self) -> int:
        return self._page

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def offset(self) -> int:
        return (self._page - 1) * self._limit

    def reset(self) -> None:
        self._page = 1

    def set_page(self, page: int) -> bool:
        """Move to *page*; returns whether the page actually changed."""
        page = self._check_page(page)
        changed = page != self._page
        self._page = page
        return changed

    def set_limit(self, limit: int) -> bool:
        """Change the page size; a new size always starts again from page 1."""
        limit = self._check_limit(limit)
        changed = limit != self._limit or self._page != 1
        self._limit = limit
        self._page = 1
        return changed

    def total_pages(self, total: int) -> int:
        if total <= 0:
            return 0
        return math.ceil(total / self._limit)

    def has_next(self, total: int) -> bool:
        return self._page < self.total_pages(total)

    def has_previous(self) -> bool:
        return self._page > 1

    def _check_page(self, page: int) -> int:
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise ValidationError(
                "page must be an integer >= 1",
                errors=[{"field": "page", "value": page}],
            )
        return page

    def _check_limit(self, limit: int) -> int:
        if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= self._max_limit:
            raise ValidationError(
                f"limit must be between 1 and {self._max_limit}",
                errors=[{"field": "limit", "value": limit}],
            )
        return limit

    def __repr__(self) -> str:
        return f"PaginationController(page={self._page}, limit={self._limit})"


__all__ = ["PaginationController"]
