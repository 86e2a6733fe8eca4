"""Search context: turns submitted search parameters into a filtered DataList.

A SearchContext is bound to one data class. It holds the form fields a
search UI should show and, separately, the filters that translate submitted
values into predicates; the two collections are independent and may diverge.
The context has no controller logic: it receives a parameter map (or a
request) and returns a DataList for further refinement or execution.

All parameter values are untrusted client input. Parameters without a
registered filter are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from starlette.requests import Request

from cmscore.core.config import get_settings
from cmscore.domain.exceptions import (
    InvalidArgumentException,
    UnsupportedConnectiveException,
)
from cmscore.forms.field_list import FieldList
from cmscore.forms.fields import FormField
from cmscore.orm.data_list import DataList, SortSpec
from cmscore.orm.field_path import FieldPath
from cmscore.orm.filters.base import SearchFilter
from cmscore.orm.schema import DataObjectSchema, get_schema
from cmscore.shared.enums import Connective
from cmscore.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

LimitSpec = int | str | Mapping[str, Any] | None | bool


class SearchContext:
    """Search fields and filters for one data class.

    Attributes:
        model_class: Data class searched and returned.
        fields: Form fields describing the search form.
        filters: Dotted field name -> SearchFilter.
        connective: Logical operator joining filter predicates. Only AND is
            implemented; anything else fails when a query is built.
    """

    def __init__(
        self,
        model_class: type | str,
        fields: FieldList | Iterable[FormField] | None = None,
        filters: Mapping[str, SearchFilter] | Iterable[SearchFilter] | None = None,
        *,
        connective: str | None = None,
        schema: DataObjectSchema | None = None,
    ) -> None:
        """Create a context.

        Args:
            model_class: Mapped class (or its name) the parameters relate to.
            fields: Optional search form fields; scaffolded from the model's
                searchable fields by get_search_fields() when empty.
            filters: Optional filters, as a name -> filter mapping or an
                iterable keyed by each filter's full name.
            connective: Defaults to settings.search_default_connective.
            schema: Schema used to resolve models; defaults to the global one.
        """
        self.schema = schema or get_schema()
        self.model_class = self.schema.resolve(model_class)
        self.fields: FieldList
        self.set_fields(fields if fields is not None else FieldList())
        self.filters: dict[str, SearchFilter] = {}
        self.set_filters(filters if filters is not None else {})
        self.connective = connective or get_settings().search_default_connective

    def get_search_fields(self) -> FieldList:
        """Fields for the search form; scaffolded from the model when none are set."""
        if len(self.fields):
            return self.fields
        from cmscore.orm.search.scaffolding import scaffold_search_fields

        return scaffold_search_fields(self.model_class, self.schema)

    @traced("cmscore.orm.search.get_query")
    def get_query(
        self,
        search_params: Mapping[str, Any] | Request | None,
        sort: SortSpec = False,
        limit: LimitSpec = False,
        existing_query: DataList | None = None,
    ) -> DataList:
        """Return a DataList filtered by search_params.

        Relation filters are addressed either by their dotted name or with
        double underscores ('author__name' for the filter registered as
        'author.name'), since HTML forms cannot submit dotted names.

        Args:
            search_params: Parameter map, or a Starlette request whose query
                parameters are used. Repeated parameters become lists.
            sort: Sort spec for DataList.sort(); False/None means the model
                default, or the existing query's ordering when one is given.
            limit: Row limit, or {"limit": n, "start": offset}; False/None means
                no limit (or the existing query's limit).
            existing_query: DataList of the same data class to refine.

        Raises:
            InvalidArgumentException: If existing_query is not a DataList of
                model_class, or limit is invalid.
            UnsupportedConnectiveException: If connective is not AND.
        """
        if str(self.connective).upper() != Connective.AND.value:
            raise UnsupportedConnectiveException(str(self.connective))

        if existing_query is not None:
            if not isinstance(existing_query, DataList):
                raise InvalidArgumentException(
                    "existing_query must be a DataList", "existing_query"
                )
            if existing_query.data_class() is not self.model_class:
                raise InvalidArgumentException(
                    f"existing_query's data class is {existing_query.data_class().__name__}, "
                    f"{self.model_class.__name__} expected.",
                    "existing_query",
                )
            query = existing_query
        else:
            query = DataList.create(self.model_class, self.schema)

        keep_existing = existing_query is not None
        if not (keep_existing and self._is_unset(limit)):
            query = self._apply_limit(query, limit)
        if not (keep_existing and self._is_unset(sort)):
            query = query.sort(None if self._is_unset(sort) else sort)

        applied = 0
        for key, value in self._param_items(search_params):
            path = FieldPath.try_from_key(key)
            search_filter = self.get_filter(path) if path is not None else None
            if search_filter is None:
                logger.debug("Ignoring search parameter %r: no filter registered", key)
                continue
            search_filter.set_model(self.model_class)
            search_filter.set_value(value)
            if search_filter.is_empty():
                logger.debug("Skipping empty filter %s", search_filter.get_full_name())
                continue
            query = query.alter_data_query(search_filter.apply)
            applied += 1

        add_span_attributes(
            **{"search.model": self.model_class.__name__, "search.filters_applied": applied}
        )
        return query

    def get_results(
        self,
        search_params: Mapping[str, Any] | Request | None,
        sort: SortSpec = False,
        limit: LimitSpec = False,
    ) -> DataList:
        """Drop empty-string parameters, then delegate to get_query().

        This check is deliberately independent of each filter's is_empty().
        """
        params = {
            key: value
            for key, value in self._param_items(search_params)
            if self.clear_empty_search_fields(value)
        }
        return self.get_query(params, sort, limit)

    @staticmethod
    def clear_empty_search_fields(value: Any) -> bool:
        """Return True if value should be kept (not None and not '')."""
        return value is not None and value != ""

    def _apply_limit(self, query: DataList, limit: LimitSpec) -> DataList:
        if isinstance(limit, Mapping):
            count, start = limit.get("limit"), limit.get("start")
        else:
            count, start = limit, None
        max_limit = get_settings().search_max_limit
        if max_limit is not None and isinstance(count, int) and not isinstance(count, bool):
            count = min(count, max_limit)
        return query.limit(count, start)

    @staticmethod
    def _is_unset(value: Any) -> bool:
        return value is None or value is False

    @staticmethod
    def _param_items(
        search_params: Mapping[str, Any] | Request | None,
    ) -> Iterator[tuple[str, Any]]:
        if search_params is None:
            return
        if isinstance(search_params, Request):
            search_params = search_params.query_params
        if hasattr(search_params, "getlist") and hasattr(search_params, "multi_items"):
            # Starlette multidicts: repeated keys become lists.
            for key in dict.fromkeys(k for k, _ in search_params.multi_items()):
                values = search_params.getlist(key)
                yield key, values[0] if len(values) == 1 else values
            return
        yield from search_params.items()

    # Filters

    def get_filter(self, name: str | FieldPath) -> SearchFilter | None:
        """Filter registered for a dotted name (or FieldPath), or None."""
        key = name.dotted if isinstance(name, FieldPath) else name
        return self.filters.get(key)

    def get_filters(self) -> dict[str, SearchFilter]:
        return self.filters

    def set_filters(
        self, filters: Mapping[str, SearchFilter] | Iterable[SearchFilter]
    ) -> None:
        """Replace the filter map."""
        if isinstance(filters, Mapping):
            self.filters = dict(filters)
        else:
            self.filters = {f.get_full_name(): f for f in filters}

    def add_filter(self, search_filter: SearchFilter) -> None:
        """Register search_filter under its full dotted name."""
        self.filters[search_filter.get_full_name()] = search_filter

    def remove_filter_by_name(self, name: str | FieldPath) -> None:
        key = name.dotted if isinstance(name, FieldPath) else name
        self.filters.pop(key, None)

    # Fields

    def get_fields(self) -> FieldList:
        return self.fields

    def set_fields(self, fields: FieldList | Iterable[FormField]) -> None:
        self.fields = fields if isinstance(fields, FieldList) else FieldList(fields)

    def add_field(self, form_field: FormField) -> None:
        self.fields.push(form_field)

    def remove_field_by_name(self, name: str) -> None:
        self.fields.remove_by_name(name)

    def __repr__(self) -> str:
        return f"<SearchContext {self.model_class.__name__} filters={list(self.filters)}>"
