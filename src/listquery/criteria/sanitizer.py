"""Criteria – sanitisation of live criteria before they reach the network.

Malformed entries are dropped one by one instead of failing the whole query,
so a half-typed filter never blocks the filters that are already complete.
Both functions are pure, order-preserving and idempotent.
"""
from __future__ import annotations

import dataclasses
import json
from decimal import Decimal
from typing import Any, Iterable, Sequence

from listquery.criteria.criterion import DateRange, FilterCriterion, SortCriterion, SortDirection
from listquery.criteria.fields import FilterField
from listquery.criteria.operators import DataType, FilterFieldType, FilterOperator

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def is_empty_value(value: Any) -> bool:
    """``None``, blank strings, empty collections and half-open ranges are empty.

    ``False`` and ``0`` are real values.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, DateRange):
        return not value.is_complete
    if isinstance(value, (dict, *_SEQUENCE_TYPES)):
        return len(value) == 0
    return False


def _is_scalar(value: Any) -> bool:
    return not isinstance(value, (dict, DateRange, *_SEQUENCE_TYPES))


def _shape_ok(definition: FilterField, operator: FilterOperator, value: Any) -> bool:
    match definition.data_type:
        case DataType.ARRAY:
            return isinstance(value, _SEQUENCE_TYPES)
        case DataType.DATE:
            if operator is FilterOperator.BETWEEN:
                return isinstance(value, DateRange)
            return not isinstance(value, (DateRange, *_SEQUENCE_TYPES))
        case DataType.BOOLEAN:
            return isinstance(value, bool)
        case DataType.NUMBER:
            if isinstance(value, bool):
                return False
            if isinstance(value, (int, float, Decimal)):
                return True
            if isinstance(value, str):
                try:
                    float(value)
                except ValueError:
                    return False
                return True
            return False
        case _:
            # choice widgets submit the option value as-is (often an int id)
            if definition.field_type is FilterFieldType.SELECT or definition.options:
                return _is_scalar(value)
            return isinstance(value, str)


def sanitize_filters(
    criteria: Iterable[FilterCriterion],
    fields: Sequence[FilterField],
) -> list[FilterCriterion]:
    """Drop incomplete or operator-invalid filter criteria."""
    by_key = {f.field: f for f in fields}
    out: list[FilterCriterion] = []
    for criterion in criteria:
        definition = by_key.get(criterion.field)
        if definition is None or criterion.operator is None:
            continue
        try:
            operator = FilterOperator(criterion.operator)
        except ValueError:
            continue
        if not definition.allows(operator):
            continue
        if is_empty_value(criterion.value):
            continue
        if not _shape_ok(definition, operator, criterion.value):
            continue
        if operator is not criterion.operator or criterion.data_type is not definition.data_type:
            criterion = dataclasses.replace(
                criterion, operator=operator, data_type=definition.data_type
            )
        out.append(criterion)
    return out


def sanitize_sorts(sorts: Iterable[SortCriterion]) -> list[SortCriterion]:
    """Drop sort entries missing a field or a valid direction."""
    out: list[SortCriterion] = []
    for sort in sorts:
        if not sort.field or sort.direction is None:
            continue
        direction = sort.direction
        if not isinstance(direction, SortDirection):
            try:
                direction = SortDirection(str(direction).upper())
            except ValueError:
                continue
            sort = dataclasses.replace(sort, direction=direction)
        out.append(sort)
    return out


def serialize_criteria(criteria: Iterable[FilterCriterion | SortCriterion]) -> str:
    """Canonical JSON form used for structural equality and request keys."""
    return json.dumps([c.to_dict() for c in criteria], sort_keys=True, default=str)


__all__ = ["is_empty_value", "sanitize_filters", "sanitize_sorts", "serialize_criteria"]
