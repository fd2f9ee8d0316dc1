"""Criteria – FilterField definitions and their definition-time validation."""
from __future__ import annotations

import dataclasses
from typing import Any, Iterable

from listquery.criteria.operators import DataType, FilterFieldType, FilterOperator, operators_for
from listquery.kernel.errors import ConfigurationError


@dataclasses.dataclass(frozen=True)
class FieldOption:
    """One choice offered by a SELECT / MULTI_SELECT widget."""
    value: Any
    label: str


@dataclasses.dataclass(frozen=True)
class FilterField:
    """Filterable column of a list view.

    ``operators`` defaults to the full registry set for ``data_type``.
    Construction validates the definition, so a bad field never reaches a
    running query.

    Besides empty values and disallowed operators, the sanitiser drops a
    criterion whose value has the wrong shape for ``data_type``:

    * STRING: a ``str``; SELECT fields and fields with ``options`` accept
      any scalar, so integer option ids pass
    * NUMBER: a number or numeric string (not ``bool``)
    * BOOLEAN: a ``bool``
    * DATE: a single date, or a complete :class:`DateRange` for BETWEEN
    * ARRAY: a list, tuple or set
    """

    field: str
    label: str
    data_type: DataType
    field_type: FilterFieldType = FilterFieldType.TEXT
    operators: tuple[FilterOperator, ...] = ()
    options: tuple[FieldOption, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "data_type", _coerce_enum(DataType, self.data_type, self.field))
        object.__setattr__(self, "field_type", _coerce_enum(FilterFieldType, self.field_type, self.field))
        operators = tuple(self.operators) or operators_for(self.data_type)
        object.__setattr__(
            self,
            "operators",
            tuple(_coerce_enum(FilterOperator, op, self.field) for op in operators),
        )
        object.__setattr__(self, "options", tuple(self.options))
        validate_filter_field(self)

    def allows(self, operator: FilterOperator) -> bool:
        return operator in self.operators


def _coerce_enum(enum_cls: Any, value: Any, field: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ConfigurationError(
            f"Filter field '{field}' has invalid {enum_cls.__name__} {value!r}",
            detail={"field": field},
            cause=exc,
        ) from exc


def validate_filter_field(field: FilterField) -> FilterField:
    """Check that every operator of *field* is legal for its data type."""
    if not field.field:
        raise ConfigurationError("Filter field key must not be empty")
    allowed = operators_for(field.data_type)
    illegal = [op.value for op in field.operators if op not in allowed]
    if illegal:
        raise ConfigurationError(
            f"Filter field '{field.field}' lists operators not permitted for "
            f"{field.data_type.value}: {', '.join(illegal)}",
            detail={"field": field.field, "operators": illegal},
        )
    return field


def validate_filter_fields(fields: Iterable[FilterField]) -> tuple[FilterField, ...]:
    """Validate a view's field set; field keys must be unique."""
    result: tuple[FilterField, ...] = tuple(fields)
    seen: set[str] = set()
    for f in result:
        validate_filter_field(f)
        if f.field in seen:
            raise ConfigurationError(
                f"Duplicate filter field '{f.field}'",
                detail={"field": f.field},
            )
        seen.add(f.field)
    return result


__all__ = ["FieldOption", "FilterField", "validate_filter_field", "validate_filter_fields"]
