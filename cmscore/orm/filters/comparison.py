"""Concrete search filters: equality, pattern matching, ordering and ranges."""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable, Mapping
from typing import Any, ClassVar

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement

from cmscore.domain.exceptions import InvalidFilterException
from cmscore.orm.field_path import FieldPath
from cmscore.orm.filters.base import MULTI_VALUE_TYPES, SearchFilter, is_empty_value
from cmscore.orm.schema import DataObjectSchema
from cmscore.shared.enums import FilterModifier

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class ExactMatchFilter(SearchFilter):
    """Equality; a list of values becomes IN. Case-sensitive unless 'nocase'."""

    def _nocase(self, value: Any) -> bool:
        return isinstance(value, str) and not self._case_sensitive(default=True)

    def _match_one(self, column: Any, value: Any) -> ColumnElement[bool]:
        if value is None:
            return column.is_(None)
        if self._nocase(value):
            return func.lower(column) == value.lower()
        return column == value

    def _match_many(self, column: Any, values: list[Any]) -> ColumnElement[bool]:
        if values and all(self._nocase(v) for v in values):
            return func.lower(column).in_([v.lower() for v in values])
        return column.in_(values)


class PartialMatchFilter(SearchFilter):
    """Substring match (LIKE '%value%'). Case-insensitive unless 'case'."""

    pattern: ClassVar[str] = "%{}%"

    def _match_one(self, column: Any, value: Any) -> ColumnElement[bool]:
        like = self.pattern.format(escape_like(str(value)))
        if self._case_sensitive(default=False):
            return column.like(like, escape=LIKE_ESCAPE)
        return column.ilike(like, escape=LIKE_ESCAPE)


class StartsWithFilter(PartialMatchFilter):
    pattern: ClassVar[str] = "{}%"


class EndsWithFilter(PartialMatchFilter):
    pattern: ClassVar[str] = "%{}"


class ComparisonFilter(SearchFilter):
    """Ordering comparison against a single value."""

    supported_modifiers = frozenset({FilterModifier.NOT})
    compare: ClassVar[Callable[[Any, Any], Any]]

    def _match_one(self, column: Any, value: Any) -> ColumnElement[bool]:
        return type(self).compare(column, value)

    def _match_many(self, column: Any, values: list[Any]) -> ColumnElement[bool]:
        raise InvalidFilterException(
            f"{type(self).__name__} does not accept multiple values", self.get_full_name()
        )


class GreaterThanFilter(ComparisonFilter):
    compare = operator.gt


class GreaterThanOrEqualFilter(ComparisonFilter):
    compare = operator.ge


class LessThanFilter(ComparisonFilter):
    compare = operator.lt


class LessThanOrEqualFilter(ComparisonFilter):
    compare = operator.le


class WithinRangeFilter(SearchFilter):
    """Inclusive range. Bounds come from a submitted (min, max) value, or else
    from the bounds configured with set_min()/set_max().

    Either bound may be left empty for an open range. Each set_value() call
    replaces the submitted bounds, so a filter reused across searches never
    carries one search's range into the next.
    """

    supported_modifiers = frozenset({FilterModifier.NOT})

    def __init__(
        self,
        full_name: str | FieldPath,
        value: Any = None,
        modifiers: Iterable[str | FilterModifier] = (),
        schema: DataObjectSchema | None = None,
        *,
        min_value: Any = None,
        max_value: Any = None,
    ) -> None:
        self.min: Any = min_value
        self.max: Any = max_value
        self._submitted: tuple[Any, Any] | None = None
        super().__init__(full_name, None, modifiers, schema)
        if value is not None:
            self.set_value(value)

    def set_min(self, value: Any) -> None:
        self.min = value

    def get_min(self) -> Any:
        return self.bounds()[0]

    def set_max(self, value: Any) -> None:
        self.max = value

    def get_max(self) -> Any:
        return self.bounds()[1]

    def bounds(self) -> tuple[Any, Any]:
        """Submitted (min, max) when a value was set, else the configured bounds."""
        if self._submitted is not None:
            return self._submitted
        return self.min, self.max

    def set_value(self, value: Any) -> None:
        """Accept (min, max), {"min": .., "max": ..} or None.

        Raises:
            InvalidFilterException: For scalars or sequences not of length 2.
        """
        self._submitted = None
        self.value = None
        if value is None or value == "":
            return
        if isinstance(value, Mapping):
            low, high = value.get("min"), value.get("max")
        elif isinstance(value, MULTI_VALUE_TYPES) and not isinstance(value, (set, frozenset)):
            if len(value) != 2:
                raise InvalidFilterException(
                    "WithinRangeFilter expects a (min, max) pair", self.get_full_name()
                )
            low, high = value
        else:
            raise InvalidFilterException(
                "WithinRangeFilter expects a (min, max) pair", self.get_full_name()
            )
        self.value = (low, high)
        self._submitted = (low, high)

    def is_empty(self) -> bool:
        low, high = self.bounds()
        return is_empty_value(low) and is_empty_value(high)

    def _predicate(self, column: Any) -> ColumnElement[bool]:
        low, high = self.bounds()
        has_min = not is_empty_value(low)
        has_max = not is_empty_value(high)
        if has_min and has_max:
            return column.between(low, high)
        if has_min:
            return column >= low
        if has_max:
            return column <= high
        raise InvalidFilterException(
            "WithinRangeFilter applied without min or max", self.get_full_name()
        )

    def _match_one(self, column: Any, value: Any) -> ColumnElement[bool]:
        return self._predicate(column)


__all__ = [
    "ComparisonFilter",
    "EndsWithFilter",
    "ExactMatchFilter",
    "GreaterThanFilter",
    "GreaterThanOrEqualFilter",
    "LessThanFilter",
    "LessThanOrEqualFilter",
    "PartialMatchFilter",
    "StartsWithFilter",
    "WithinRangeFilter",
    "escape_like",
]
