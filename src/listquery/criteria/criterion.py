"""Criteria – live filter and sort criterion instances."""
from __future__ import annotations

import dataclasses
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping

from listquery.criteria.operators import DataType, FilterOperator


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclasses.dataclass(frozen=True)
class DateRange:
    """Inclusive date window used with ``FilterOperator.BETWEEN``."""
    start: date | datetime | str | None = None
    end: date | datetime | str | None = None

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None


@dataclasses.dataclass(frozen=True)
class FilterCriterion:
    """One filter condition as entered by the user."""

    field: str
    operator: FilterOperator | str | None
    value: Any = None
    data_type: DataType | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "field": self.field,
            "operator": _plain(self.operator),
            "value": _plain(self.value),
        }
        if self.data_type is not None:
            payload["data_type"] = _plain(self.data_type)
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilterCriterion":
        value = data.get("value")
        if isinstance(value, Mapping) and set(value) <= {"start", "end"}:
            value = DateRange(value.get("start"), value.get("end"))
        data_type = data.get("data_type")
        return cls(
            field=data.get("field", ""),
            operator=data.get("operator"),
            value=value,
            data_type=DataType(data_type) if data_type else None,
        )


@dataclasses.dataclass(frozen=True)
class SortOption:
    """Sortable column offered by a view."""
    field: str
    label: str = ""
    direction: SortDirection = SortDirection.ASC

    def to_criterion(self, direction: SortDirection | None = None) -> "SortCriterion":
        return SortCriterion(self.field, self.label, direction or self.direction)


@dataclasses.dataclass(frozen=True)
class SortCriterion:
    """Active sort instance."""
    field: str
    label: str = ""
    direction: SortDirection | str | None = SortDirection.ASC

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "direction": _plain(self.direction)}


def _plain(value: Any) -> Any:
    """Project a criterion value onto JSON-friendly primitives."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, DateRange):
        return {"start": _plain(value.start), "end": _plain(value.end)}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [_plain(v) for v in value]
        return sorted(items, key=repr) if isinstance(value, (set, frozenset)) else items
    return value


__all__ = ["DateRange", "FilterCriterion", "SortCriterion", "SortDirection", "SortOption"]
