"""The closed set of search filter kinds and a factory for filter specs.

Filter specs are strings such as "PartialMatch", "ExactMatch:nocase" or
"GreaterThan:not"; the part before the first colon names the kind and the
rest are modifiers.
"""

from __future__ import annotations

from typing import Any

from cmscore.domain.exceptions import InvalidFilterException
from cmscore.orm.field_path import FieldPath
from cmscore.orm.filters.base import SearchFilter
from cmscore.orm.filters.comparison import (
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
from cmscore.orm.schema import DataObjectSchema
from cmscore.shared.enums import FilterKind

FILTER_CLASSES: dict[FilterKind, type[SearchFilter]] = {
    FilterKind.EXACT_MATCH: ExactMatchFilter,
    FilterKind.PARTIAL_MATCH: PartialMatchFilter,
    FilterKind.STARTS_WITH: StartsWithFilter,
    FilterKind.ENDS_WITH: EndsWithFilter,
    FilterKind.GREATER_THAN: GreaterThanFilter,
    FilterKind.GREATER_THAN_OR_EQUAL: GreaterThanOrEqualFilter,
    FilterKind.LESS_THAN: LessThanFilter,
    FilterKind.LESS_THAN_OR_EQUAL: LessThanOrEqualFilter,
    FilterKind.WITHIN_RANGE: WithinRangeFilter,
}


def parse_filter_spec(spec: str | FilterKind) -> tuple[FilterKind, list[str]]:
    """Split 'Kind:mod:mod' into (FilterKind, modifiers).

    'ExactMatchFilter' is accepted as an alias of 'ExactMatch'.

    Raises:
        InvalidFilterException: For unknown kinds.
    """
    if isinstance(spec, FilterKind):
        return spec, []
    name, *modifiers = [part.strip() for part in spec.split(":")]
    if name.endswith("Filter"):
        name = name[: -len("Filter")]
    try:
        return FilterKind(name), [m for m in modifiers if m]
    except ValueError:
        raise InvalidFilterException(f"Unknown filter kind '{name}'") from None


def create_filter(
    spec: str | FilterKind,
    name: str | FieldPath,
    value: Any = None,
    schema: DataObjectSchema | None = None,
) -> SearchFilter:
    """Build a filter for name from a spec such as 'PartialMatch:nocase'."""
    kind, modifiers = parse_filter_spec(spec)
    return FILTER_CLASSES[kind](name, value, modifiers, schema)
