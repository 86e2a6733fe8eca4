"""Search filter contract.

A filter is bound to one field path (possibly through relations), receives
a submitted value, and applies a predicate for it to a DataQuery. Filters
are stateful between set_value() and apply(); a SearchContext reuses the
same instance across calls, rebinding model and value each time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, ClassVar

from sqlalchemy import not_, or_
from sqlalchemy.sql.elements import ColumnElement

from cmscore.domain.exceptions import InvalidFilterException
from cmscore.orm.data_query import DataQuery
from cmscore.orm.field_path import FieldPath
from cmscore.orm.schema import DataObjectSchema, get_schema
from cmscore.shared.enums import FilterModifier

MULTI_VALUE_TYPES = (list, tuple, set, frozenset)


def is_empty_value(value: Any) -> bool:
    """None, '' and collections whose items are all empty are empty; 0 and False are not."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, MULTI_VALUE_TYPES):
        return all(is_empty_value(item) for item in value)
    return False


class SearchFilter(ABC):
    """Base class for search filters.

    Subclasses implement _match_one() (and optionally _match_many()) to build
    a predicate for one column; apply() takes care of relation joins and the
    'not' modifier.
    """

    supported_modifiers: ClassVar[frozenset[FilterModifier]] = frozenset(
        {FilterModifier.NOT, FilterModifier.CASE, FilterModifier.NOCASE}
    )

    def __init__(
        self,
        full_name: str | FieldPath,
        value: Any = None,
        modifiers: Iterable[str | FilterModifier] = (),
        schema: DataObjectSchema | None = None,
    ) -> None:
        """Create a filter for a dotted field path.

        Args:
            full_name: Field path, e.g. 'title' or 'author.name'.
            value: Optional initial value.
            modifiers: Filter modifiers ('not', 'case', 'nocase').
            schema: Schema used to resolve models; defaults to the global one.
        """
        self.schema = schema or get_schema()
        self.full_name = FieldPath.coerce(full_name)
        self.model: type | None = None
        self.value: Any = value
        self.modifiers: frozenset[FilterModifier] = frozenset()
        self.set_modifiers(modifiers)

    def set_model(self, model: type | str) -> None:
        """Bind the data class the field path starts from."""
        self.model = self.schema.resolve(model)

    def get_model(self) -> type | None:
        return self.model

    def set_value(self, value: Any) -> None:
        self.value = value

    def get_value(self) -> Any:
        return self.value

    def set_modifiers(self, modifiers: Iterable[str | FilterModifier]) -> None:
        """Validate and store modifiers.

        Raises:
            InvalidFilterException: For unknown or unsupported modifiers, or
                when 'case' and 'nocase' are combined.
        """
        parsed: set[FilterModifier] = set()
        for raw in modifiers:
            try:
                modifier = FilterModifier(str(raw).strip().lower())
            except ValueError:
                raise InvalidFilterException(
                    f"Unknown filter modifier '{raw}'", self.get_full_name()
                ) from None
            if modifier not in self.supported_modifiers:
                raise InvalidFilterException(
                    f"{type(self).__name__} does not support modifier '{modifier.value}'",
                    self.get_full_name(),
                )
            parsed.add(modifier)
        if {FilterModifier.CASE, FilterModifier.NOCASE} <= parsed:
            raise InvalidFilterException(
                "Modifiers 'case' and 'nocase' are mutually exclusive", self.get_full_name()
            )
        self.modifiers = frozenset(parsed)

    def get_modifiers(self) -> frozenset[FilterModifier]:
        return self.modifiers

    def get_full_name(self) -> str:
        """Dotted path, e.g. 'author.name'; the key a SearchContext registers it under."""
        return self.full_name.dotted

    def get_name(self) -> str:
        """Field name at the end of the path."""
        return self.full_name.field

    def get_relation_name(self) -> str:
        """Dotted relation part of the path ('' for a plain field)."""
        return ".".join(self.full_name.relation)

    def is_empty(self) -> bool:
        return is_empty_value(self.get_value())

    def get_db_name(self, query: DataQuery) -> tuple[DataQuery, Any]:
        """Return (query with relation joins, column) this filter compares against."""
        return query.apply_field(self.full_name)

    def apply(self, query: DataQuery) -> DataQuery:
        """Return query restricted by this filter's predicate.

        Raises:
            InvalidFilterException: If the filter is bound to a different model.
            InvalidRelationException: If the path crosses an unknown relation.
            InvalidFieldException: If the field is not a mapped column.
        """
        if self.model is not None and self.model is not query.data_class():
            raise InvalidFilterException(
                f"Filter bound to {self.model.__name__} applied to a "
                f"{query.data_class().__name__} query",
                self.get_full_name(),
            )
        query, column = self.get_db_name(query)
        predicate = self._predicate(column)
        if FilterModifier.NOT in self.modifiers:
            # NULLs are neither equal nor unequal; keep them in negated results.
            return query.where(or_(not_(predicate), column.is_(None)))
        return query.where(predicate)

    def _predicate(self, column: Any) -> ColumnElement[bool]:
        value = self.get_value()
        if isinstance(value, MULTI_VALUE_TYPES):
            return self._match_many(
                column, [item for item in value if not is_empty_value(item)]
            )
        return self._match_one(column, value)

    @abstractmethod
    def _match_one(self, column: Any, value: Any) -> ColumnElement[bool]:
        """Predicate for a single submitted value."""

    def _match_many(self, column: Any, values: list[Any]) -> ColumnElement[bool]:
        """Predicate for several values; matches any of them by default."""
        return or_(*(self._match_one(column, value) for value in values))

    def _case_sensitive(self, default: bool) -> bool:
        if FilterModifier.CASE in self.modifiers:
            return True
        if FilterModifier.NOCASE in self.modifiers:
            return False
        return default

    def __repr__(self) -> str:
        modifiers = "".join(f":{m.value}" for m in sorted(self.modifiers))
        return f"<{type(self).__name__}{modifiers} {self.get_full_name()}={self.value!r}>"
