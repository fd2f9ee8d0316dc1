"""Criteria – data types, filter operators and the operator registry."""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from listquery.kernel.errors import ConfigurationError


class DataType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    ARRAY = "array"


class FilterOperator(str, Enum):
    EQUALS = "eq"
    NOT_EQUALS = "neq"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "gt"
    LESS_THAN = "lt"
    IS_ANY_OF = "in"
    IS_NOT_ANY_OF = "not_in"
    BEFORE = "before"
    AFTER = "after"
    BETWEEN = "between"


class FilterFieldType(str, Enum):
    """Input widget used to edit a filter value."""
    TEXT = "text"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    DATEPICKER = "datepicker"
    NUMBER = "number"


DEFAULT_OPERATORS_PER_DATA_TYPE: Mapping[DataType, tuple[FilterOperator, ...]] = MappingProxyType({
    DataType.STRING: (
        FilterOperator.EQUALS,
        FilterOperator.NOT_EQUALS,
        FilterOperator.CONTAINS,
        FilterOperator.NOT_CONTAINS,
        FilterOperator.STARTS_WITH,
        FilterOperator.ENDS_WITH,
    ),
    DataType.NUMBER: (
        FilterOperator.EQUALS,
        FilterOperator.NOT_EQUALS,
        FilterOperator.GREATER_THAN,
        FilterOperator.LESS_THAN,
    ),
    DataType.DATE: (
        FilterOperator.BEFORE,
        FilterOperator.AFTER,
        FilterOperator.BETWEEN,
    ),
    DataType.BOOLEAN: (FilterOperator.EQUALS,),
    DataType.ARRAY: (
        FilterOperator.IS_ANY_OF,
        FilterOperator.IS_NOT_ANY_OF,
    ),
})


def operators_for(data_type: DataType | str) -> tuple[FilterOperator, ...]:
    """Return the ordered operators legal for *data_type*.

    Raises :class:`ConfigurationError` when the data type has no registry entry.
    """
    try:
        key = DataType(data_type)
        return DEFAULT_OPERATORS_PER_DATA_TYPE[key]
    except (ValueError, KeyError) as exc:
        raise ConfigurationError(
            f"No operators registered for data type {data_type!r}",
            detail={"data_type": str(data_type)},
            cause=exc,
        ) from exc


__all__ = [
    "DEFAULT_OPERATORS_PER_DATA_TYPE",
    "DataType",
    "FilterFieldType",
    "FilterOperator",
    "operators_for",
]
