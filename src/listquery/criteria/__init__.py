"""Criteria – filter/sort model, operator registry and sanitiser."""
from listquery.criteria.criterion import (
    DateRange,
    FilterCriterion,
    SortCriterion,
    SortDirection,
    SortOption,
)
from listquery.criteria.fields import (
    FieldOption,
    FilterField,
    validate_filter_field,
    validate_filter_fields,
)
from listquery.criteria.operators import (
    DEFAULT_OPERATORS_PER_DATA_TYPE,
    DataType,
    FilterFieldType,
    FilterOperator,
    operators_for,
)
from listquery.criteria.sanitizer import (
    is_empty_value,
    sanitize_filters,
    sanitize_sorts,
    serialize_criteria,
)

__all__ = [
    "DEFAULT_OPERATORS_PER_DATA_TYPE",
    "DataType",
    "DateRange",
    "FieldOption",
    "FilterCriterion",
    "FilterField",
    "FilterFieldType",
    "FilterOperator",
    "SortCriterion",
    "SortDirection",
    "SortOption",
    "is_empty_value",
    "operators_for",
    "sanitize_filters",
    "sanitize_sorts",
    "serialize_criteria",
]
