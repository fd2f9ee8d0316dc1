"""Pagination – fetch contract: PageParams in, QueryResult out."""
from __future__ import annotations

import dataclasses
from typing import Any, Awaitable, Callable, Generic, Mapping, TypeVar

from listquery.criteria import FilterCriterion, SortCriterion
from listquery.kernel.errors import SerializationError

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class PageParams:
    """Arguments of one page fetch."""
    limit: int
    offset: int = 0
    filters: tuple[FilterCriterion, ...] = ()
    sort: tuple[SortCriterion, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        """JSON body for a search endpoint."""
        return {
            "limit": self.limit,
            "offset": self.offset,
            "filters": [f.to_dict() for f in self.filters],
            "sort": [s.to_dict() for s in self.sort],
        }


@dataclasses.dataclass(frozen=True)
class PageInfo:
    total: int = 0


@dataclasses.dataclass
class QueryResult(Generic[T]):
    """One page of items plus the server-side total."""

    items: list[T]
    pagination: PageInfo = dataclasses.field(default_factory=PageInfo)

    @property
    def total(self) -> int:
        return self.pagination.total

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        item_factory: Callable[[Any], T] | None = None,
    ) -> "QueryResult[T]":
        """Decode ``{"items": [...], "pagination": {"total": n}}``."""
        try:
            raw_items = data["items"]
            if raw_items is None:
                raw_items = []
            if not isinstance(raw_items, list):
                raise TypeError(f"items must be a list, got {type(raw_items).__name__}")
            pagination = data.get("pagination") or {}
            total = int(pagination.get("total", len(raw_items)))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise SerializationError(
                f"Malformed page payload: {exc}",
                payload_type="QueryResult",
                cause=exc,
            ) from exc
        items = [item_factory(i) for i in raw_items] if item_factory else list(raw_items)
        return cls(items=items, pagination=PageInfo(total=total))

    @classmethod
    def coerce(cls, value: "QueryResult[T] | Mapping[str, Any]") -> "QueryResult[T]":
        """Accept either a QueryResult or its dict form from a fetch function."""
        if isinstance(value, QueryResult):
            return value
        if isinstance(value, Mapping):
            return cls.from_dict(value)
        raise SerializationError(
            f"Fetch returned {type(value).__name__}, expected QueryResult or mapping",
            payload_type="QueryResult",
        )


FetchPage = Callable[[PageParams], Awaitable["QueryResult[Any] | Mapping[str, Any]"]]

__all__ = ["FetchPage", "PageInfo", "PageParams", "QueryResult"]
