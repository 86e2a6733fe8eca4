"""Immutable query builder around a SQLAlchemy Select of one data class.

Every mutator returns a new DataQuery; the statement and the join cache
are never shared mutably between instances, so a DataQuery handed to a
filter can be extended without affecting the caller's copy.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, and_, not_, or_, select
from sqlalchemy.orm import aliased
from sqlalchemy.sql.elements import ColumnElement

from cmscore.orm.field_path import FieldPath
from cmscore.orm.schema import DataObjectSchema, get_schema


class DataQuery:
    """Select statement plus the relation joins already applied to it."""

    def __init__(
        self,
        model: type,
        statement: Select | None = None,
        joins: dict[tuple[str, ...], tuple[type, Any]] | None = None,
        schema: DataObjectSchema | None = None,
        *,
        to_many: frozenset[tuple[str, ...]] = frozenset(),
        order_columns: tuple[Any, ...] = (),
    ) -> None:
        self.schema = schema or get_schema()
        self.model = self.schema.resolve(model)
        self._statement = statement if statement is not None else select(self.model)
        # relation path -> (target class, aliased entity used in the statement)
        self._joins: dict[tuple[str, ...], tuple[type, Any]] = dict(joins or {})
        # joined paths that pass through a to-many relationship
        self._to_many = to_many
        # joined columns named in ORDER BY; selected too once the query is DISTINCT
        self._order_columns = order_columns

    def _copy(
        self,
        statement: Select | None = None,
        joins: dict[tuple[str, ...], tuple[type, Any]] | None = None,
        *,
        to_many: frozenset[tuple[str, ...]] | None = None,
        order_columns: tuple[Any, ...] | None = None,
    ) -> DataQuery:
        return DataQuery(
            self.model,
            statement if statement is not None else self._statement,
            joins if joins is not None else self._joins,
            self.schema,
            to_many=to_many if to_many is not None else self._to_many,
            order_columns=order_columns if order_columns is not None else self._order_columns,
        )

    def data_class(self) -> type:
        return self.model

    @property
    def is_distinct(self) -> bool:
        return bool(self._to_many)

    def statement(self) -> Select:
        """The select to execute.

        A query joined through a to-many relationship is DISTINCT, and the
        joined columns it orders by are added to the select list, since
        PostgreSQL requires ORDER BY expressions of a DISTINCT select to be
        selected. They are to-one columns, so rows stay one per record.
        """
        if not self.is_distinct:
            return self._statement
        statement = self._statement
        if self._order_columns:
            statement = statement.add_columns(*self._order_columns)
        return statement.distinct()

    def where(self, *clauses: ColumnElement[bool]) -> DataQuery:
        """AND clauses into the WHERE clause."""
        if not clauses:
            return self
        return self._copy(self._statement.where(and_(*clauses)))

    def where_any(self, *clauses: ColumnElement[bool]) -> DataQuery:
        """AND a single OR-group of clauses into the WHERE clause."""
        if not clauses:
            return self
        return self._copy(self._statement.where(or_(*clauses)))

    def exclude(self, *clauses: ColumnElement[bool]) -> DataQuery:
        """AND NOT(all clauses) into the WHERE clause."""
        if not clauses:
            return self
        return self._copy(self._statement.where(not_(and_(*clauses))))

    def apply_relation(self, relation: Sequence[str]) -> tuple[DataQuery, Any]:
        """Join each relationship in relation and return the entity at its end.

        Joins are LEFT OUTER so rows without related records stay visible to
        negated filters. Each path is joined once; repeated traversals reuse
        the alias. Traversing a to-many relationship makes the select DISTINCT.

        Returns:
            (query with joins, aliased entity to build predicates against).
            With an empty relation, the query itself and the data class.

        Raises:
            InvalidRelationException: If a segment is not a relationship.
        """
        query: DataQuery = self
        current_cls: type = self.model
        current_entity: Any = self.model
        path: tuple[str, ...] = ()
        for segment in relation:
            parent = path
            path = path + (segment,)
            if path in query._joins:
                current_cls, current_entity = query._joins[path]
                continue
            attribute = self.schema.relation_attribute(current_cls, segment)
            target_cls = self.schema.relation_target(current_cls, segment)
            target_alias = aliased(target_cls, name="_".join(("rel",) + path).lower())
            statement = query._statement.outerjoin(
                getattr(current_entity, segment).of_type(target_alias)
            )
            to_many = query._to_many
            if attribute.property.uselist or parent in to_many:
                to_many = to_many | {path}
            joins = dict(query._joins)
            joins[path] = (target_cls, target_alias)
            query = query._copy(statement, joins, to_many=to_many)
            current_cls, current_entity = target_cls, target_alias
        return query, current_entity

    def is_to_many(self, relation: Sequence[str]) -> bool:
        """True if relation, once joined, passes through a to-many relationship."""
        return tuple(relation) in self._to_many

    def apply_field(self, path: FieldPath) -> tuple[DataQuery, Any]:
        """Join path's relations and return the column path names.

        Raises:
            InvalidRelationException: If a relation segment is not a relationship.
            InvalidFieldException: If the last segment is not a mapped column.
        """
        query, entity = self.apply_relation(path.relation)
        target_cls = query._joins[path.relation][0] if path.is_relation else self.model
        self.schema.field_column(target_cls, path.field)
        return query, getattr(entity, path.field)

    def order_by(self, *clauses: Any, joined_columns: Sequence[Any] = ()) -> DataQuery:
        """Replace the ORDER BY clause (no clauses clears it).

        Args:
            clauses: Ordering clauses.
            joined_columns: Columns of joined relations that clauses order by.
        """
        statement = self._statement.order_by(None)
        if clauses:
            statement = statement.order_by(*clauses)
        return self._copy(statement, order_columns=tuple(joined_columns))

    def limit(self, limit: int | None, offset: int | None = None) -> DataQuery:
        """Set LIMIT/OFFSET; None clears either."""
        return self._copy(self._statement.limit(limit).offset(offset))

    def __repr__(self) -> str:
        return f"<DataQuery {self.model.__name__} joins={[p for p in self._joins]}>"
