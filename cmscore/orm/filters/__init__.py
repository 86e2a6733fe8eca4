"""Search filters: strategies turning one submitted value into a query predicate."""

from cmscore.orm.filters.base import SearchFilter, is_empty_value
from cmscore.orm.filters.comparison import (
    ComparisonFilter,
    EndsWithFilter,
    ExactMatchFilter,
    GreaterThanFilter,
    GreaterThanOrEqualFilter,
    LessThanFilter,
    LessThanOrEqualFilter,
    PartialMatchFilter,
    StartsWithFilter,
    WithinRangeFilter,
)
from cmscore.orm.filters.registry import (
    FILTER_CLASSES,
    FilterKind,
    create_filter,
    parse_filter_spec,
)

__all__ = [
    "FILTER_CLASSES",
    "ComparisonFilter",
    "EndsWithFilter",
    "ExactMatchFilter",
    "FilterKind",
    "GreaterThanFilter",
    "GreaterThanOrEqualFilter",
    "LessThanFilter",
    "LessThanOrEqualFilter",
    "PartialMatchFilter",
    "SearchFilter",
    "StartsWithFilter",
    "WithinRangeFilter",
    "create_filter",
    "is_empty_value",
    "parse_filter_spec",
]
