"""Default search filters and fields derived from a model's declarations.

Models opt in with ``__searchable_fields__``; without it every plain column
(no primary or foreign key) is searchable.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Boolean, Date, DateTime, Enum, Integer, Numeric, String
from sqlalchemy import inspect as sa_inspect

from cmscore.forms.field_list import FieldList
from cmscore.forms.fields import (
    CheckboxField,
    DateField,
    DropdownField,
    FormField,
    NumericField,
    TextField,
)
from cmscore.orm.field_path import FieldPath
from cmscore.orm.filters.base import SearchFilter
from cmscore.orm.filters.registry import create_filter
from cmscore.orm.schema import DataObjectSchema, get_schema
from cmscore.orm.search.search_context import SearchContext
from cmscore.shared.enums import FilterKind

logger = logging.getLogger(__name__)


def _searchable(model: type, schema: DataObjectSchema) -> dict[str, dict[str, Any]]:
    declared = schema.searchable_fields(model)
    if declared:
        return declared
    mapper = sa_inspect(model)
    return {
        attr.key: {"filter": None, "title": None}
        for attr in mapper.column_attrs
        if not any(col.primary_key or col.foreign_keys for col in attr.columns)
    }


def field_type_for(model: type, path: FieldPath, schema: DataObjectSchema) -> Any:
    """SQLAlchemy type of the column at the end of path, following relations."""
    current = model
    for relation in path.relation:
        current = schema.relation_target(current, relation)
    return schema.column_type(current, path.field)


def default_filter_kind(column_type: Any) -> FilterKind:
    """PartialMatch for string columns (enums excluded), ExactMatch otherwise."""
    if isinstance(column_type, String) and not isinstance(column_type, Enum):
        return FilterKind.PARTIAL_MATCH
    return FilterKind.EXACT_MATCH


def default_search_filters(
    model: type | str, schema: DataObjectSchema | None = None
) -> list[SearchFilter]:
    """One filter per searchable field of model."""
    schema = schema or get_schema()
    cls = schema.resolve(model)
    filters = []
    for name, options in _searchable(cls, schema).items():
        path = FieldPath.from_dotted(name)
        spec = options.get("filter") or default_filter_kind(field_type_for(cls, path, schema))
        filters.append(create_filter(spec, path, schema=schema))
    return filters


def form_field_for(name: str, column_type: Any, title: str | None = None) -> FormField:
    """Form field matching a column type."""
    # Enum subclasses String; check it first.
    if isinstance(column_type, Enum):
        source = {value: value for value in column_type.enums}
        return DropdownField(name, title, source=source)
    if isinstance(column_type, Boolean):
        return CheckboxField(name, title)
    if isinstance(column_type, (Date, DateTime)):
        return DateField(name, title)
    if isinstance(column_type, (Integer, Numeric)):
        return NumericField(name, title)
    if isinstance(column_type, String):
        return TextField(name, title, max_length=column_type.length)
    return TextField(name, title)


def scaffold_search_fields(
    model: type | str, schema: DataObjectSchema | None = None
) -> FieldList:
    """Search form fields for model; names use the parameter form ('author__name')."""
    schema = schema or get_schema()
    cls = schema.resolve(model)
    fields = FieldList()
    for name, options in _searchable(cls, schema).items():
        path = FieldPath.from_dotted(name)
        fields.push(
            form_field_for(path.param, field_type_for(cls, path, schema), options.get("title"))
        )
    logger.debug("Scaffolded search fields for %s: %s", cls.__name__, fields.names())
    return fields


def default_search_context(
    model: type | str, schema: DataObjectSchema | None = None
) -> SearchContext:
    """SearchContext with scaffolded fields and default filters."""
    schema = schema or get_schema()
    cls = schema.resolve(model)
    return SearchContext(
        cls,
        scaffold_search_fields(cls, schema),
        default_search_filters(cls, schema),
        schema=schema,
    )
