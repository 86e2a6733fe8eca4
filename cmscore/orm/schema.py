"""Data class registry and schema lookups over SQLAlchemy mappers.

Resolves model identifiers (class, class name, qualified name or table
name) to mapped classes and answers structural questions: base table,
class hierarchy, columns, relations, default sort and searchable fields.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import DeclarativeBase, Mapper
from sqlalchemy.orm.attributes import InstrumentedAttribute

from cmscore.domain.exceptions import (
    InvalidFieldException,
    InvalidRelationException,
    UnknownModelException,
)
from cmscore.orm.database import Base


def _model_name(model: Any) -> str:
    return getattr(model, "__name__", str(model))


class DataObjectSchema:
    """Schema lookups for every class mapped on one declarative base."""

    def __init__(self, base: type[DeclarativeBase] = Base) -> None:
        self.base = base

    def _mapper(self, model: type) -> Mapper:
        mapper = sa_inspect(model, raiseerr=False)
        if not isinstance(mapper, Mapper):
            raise UnknownModelException(_model_name(model))
        return mapper

    def resolve(self, model_or_name: type | str) -> type:
        """Return the mapped class for a class or identifier.

        Strings match, in order: qualified name ('pkg.models.Page'),
        class name ('Page'), then table name ('page').

        Raises:
            UnknownModelException: If nothing matches.
        """
        if isinstance(model_or_name, type):
            return self._mapper(model_or_name).class_
        name = model_or_name
        mappers = sorted(
            self.base.registry.mappers, key=lambda m: m.class_.__qualname__
        )
        for matches in (
            lambda m: f"{m.class_.__module__}.{m.class_.__qualname__}" == name,
            lambda m: m.class_.__name__ == name,
            lambda m: m.local_table is not None and m.local_table.name == name,
        ):
            for mapper in mappers:
                if matches(mapper):
                    return mapper.class_
        raise UnknownModelException(name)

    def base_data_class(self, model: type | str) -> type:
        """Root class of the inheritance hierarchy model belongs to."""
        return self._mapper(self.resolve(model)).base_mapper.class_

    def base_data_table(self, model: type | str) -> str:
        """Table name of the root class (holds the shared primary key)."""
        return self._mapper(self.resolve(model)).base_mapper.local_table.name

    def data_classes_for(self, model: type | str) -> list[type]:
        """Ancestors (base first), the model itself, then its mapped subclasses."""
        mapper = self._mapper(self.resolve(model))
        ancestry = [m.class_ for m in reversed(list(mapper.iterate_to_root()))]
        descendants = [
            m.class_ for m in mapper.self_and_descendants if m is not mapper
        ]
        return ancestry + descendants

    def has_field(self, model: type | str, name: str) -> bool:
        return name in self._mapper(self.resolve(model)).column_attrs

    def field_column(self, model: type | str, name: str) -> InstrumentedAttribute:
        """Return the instrumented column attribute for name.

        Raises:
            InvalidFieldException: If name is not a mapped column.
        """
        cls = self.resolve(model)
        if name not in self._mapper(cls).column_attrs:
            raise InvalidFieldException(cls.__name__, name)
        return getattr(cls, name)

    def column_type(self, model: type | str, name: str) -> Any:
        """SQLAlchemy type of a mapped column."""
        cls = self.resolve(model)
        mapper = self._mapper(cls)
        if name not in mapper.column_attrs:
            raise InvalidFieldException(cls.__name__, name)
        return mapper.column_attrs[name].columns[0].type

    def has_relation(self, model: type | str, name: str) -> bool:
        return name in self._mapper(self.resolve(model)).relationships

    def relation_attribute(self, model: type | str, name: str) -> InstrumentedAttribute:
        """Return the instrumented relationship attribute for name.

        Raises:
            InvalidRelationException: If name is not a relationship.
        """
        cls = self.resolve(model)
        if name not in self._mapper(cls).relationships:
            raise InvalidRelationException(cls.__name__, name)
        return getattr(cls, name)

    def relation_target(self, model: type | str, name: str) -> type:
        """Class on the far side of relationship name."""
        cls = self.resolve(model)
        mapper = self._mapper(cls)
        if name not in mapper.relationships:
            raise InvalidRelationException(cls.__name__, name)
        return mapper.relationships[name].mapper.class_

    def primary_key_names(self, model: type | str) -> list[str]:
        mapper = self._mapper(self.resolve(model))
        return [mapper.get_property_by_column(col).key for col in mapper.primary_key]

    def default_sort(self, model: type | str) -> Any:
        """__default_sort__ of the model, else its primary key ascending."""
        cls = self.resolve(model)
        declared = getattr(cls, "__default_sort__", None)
        if declared:
            return declared
        return ", ".join(self.primary_key_names(cls))

    def searchable_fields(self, model: type | str) -> dict[str, dict[str, Any]]:
        """Normalize __searchable_fields__ into {dotted name: {"filter", "title"}}.

        Accepted declarations:
            ("title", "author.name")
            {"title": "PartialMatch:nocase", "status": {"filter": "ExactMatch", "title": "State"}}
        """
        cls = self.resolve(model)
        declared = getattr(cls, "__searchable_fields__", None) or ()
        normalized: dict[str, dict[str, Any]] = {}
        if isinstance(declared, dict):
            for name, spec in declared.items():
                if isinstance(spec, dict):
                    normalized[name] = {
                        "filter": spec.get("filter"),
                        "title": spec.get("title"),
                    }
                else:
                    normalized[name] = {"filter": spec, "title": None}
        else:
            for name in declared:
                normalized[name] = {"filter": None, "title": None}
        return normalized


@lru_cache
def get_schema() -> DataObjectSchema:
    """Return the schema over cmscore's declarative Base (single instance per process)."""
    return DataObjectSchema()
