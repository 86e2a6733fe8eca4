"""Lazily executed, immutable list of records of one data class.

A DataList only builds SQL; nothing touches the database until all(),
first() or count() is awaited with a session. Every modifier returns a
new DataList so callers can keep refining a list they were handed.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.engine import Dialect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ClauseElement

from cmscore.domain.exceptions import InvalidArgumentException
from cmscore.orm.data_query import DataQuery
from cmscore.orm.field_path import FieldPath
from cmscore.orm.schema import DataObjectSchema, get_schema
from cmscore.shared.enums import SortDirection
from cmscore.shared.telemetry.tracing import traced

SortSpec = str | Mapping[str, str] | Sequence[Any] | ClauseElement | None | bool


def _coerce_limit_value(value: Any, argument: str) -> int | None:
    """Accept ints and digit strings; None/False mean unset. Raises on anything else."""
    if value is None or value is False:
        return None
    if isinstance(value, bool):
        raise InvalidArgumentException(f"{argument} must be an integer, got True", argument)
    if isinstance(value, str):
        if not value.strip().isdecimal():
            raise InvalidArgumentException(
                f"{argument} must be a non-negative integer, got {value!r}", argument
            )
        value = int(value.strip())
    if not isinstance(value, int):
        raise InvalidArgumentException(
            f"{argument} must be an integer, got {type(value).__name__}", argument
        )
    if value < 0:
        raise InvalidArgumentException(
            f"{argument} must not be negative, got {value}", argument
        )
    return value


class DataList:
    """Composable query over one data class, executed on demand."""

    def __init__(
        self,
        model: type | str,
        data_query: DataQuery | None = None,
        schema: DataObjectSchema | None = None,
    ) -> None:
        self.schema = schema or get_schema()
        self.model = self.schema.resolve(model)
        self._query = data_query if data_query is not None else DataQuery(
            self.model, schema=self.schema
        )

    @classmethod
    def create(cls, model: type | str, schema: DataObjectSchema | None = None) -> DataList:
        """Unfiltered list of model records."""
        return cls(model, schema=schema)

    def data_class(self) -> type:
        return self.model

    def data_query(self) -> DataQuery:
        return self._query

    def alter_data_query(self, callback: Callable[[DataQuery], DataQuery]) -> DataList:
        """Return a new list whose query is callback(current query)."""
        altered = callback(self._query)
        if not isinstance(altered, DataQuery):
            raise InvalidArgumentException(
                "alter_data_query callback must return a DataQuery", "callback"
            )
        return DataList(self.model, altered, self.schema)

    def limit(self, limit: Any, offset: Any = None) -> DataList:
        """Limit the list to limit records starting at offset.

        None, False and 0 remove the limit; numeric strings are accepted.

        Raises:
            InvalidArgumentException: For negative or non-numeric values.
        """
        limit_value = _coerce_limit_value(limit, "limit") or None
        offset_value = _coerce_limit_value(offset, "offset") or None
        return self.alter_data_query(lambda q: q.limit(limit_value, offset_value))

    def sort(self, spec: SortSpec = None) -> DataList:
        """Replace the ordering.

        Args:
            spec: None/False for the model's default sort; "title DESC, id";
                {"title": "DESC"}; ["title", "author.name DESC"]; or SQLAlchemy
                clauses. Dotted names sort through relations.

        Raises:
            InvalidArgumentException: For an unknown sort direction, or a
                name that sorts through a to-many relationship.
            InvalidFieldException: For an unknown column.
        """
        if spec is None or spec is False or (isinstance(spec, str) and not spec.strip()):
            spec = self.schema.default_sort(self.model)
        if spec is True:
            raise InvalidArgumentException("sort must not be True", "sort")
        query = self._query
        clauses: list[Any] = []
        joined_columns: list[Any] = []
        for item in self._sort_items(spec):
            if isinstance(item, ClauseElement):
                clauses.append(item)
                continue
            name, direction = item
            try:
                path = FieldPath.from_dotted(name)
            except ValueError as e:
                raise InvalidArgumentException(str(e), "sort") from e
            query, column = query.apply_field(path)
            if path.is_relation:
                if query.is_to_many(path.relation):
                    raise InvalidArgumentException(
                        f"Cannot sort by {name!r}: it passes through a to-many relationship",
                        "sort",
                    )
                joined_columns.append(column)
            clauses.append(column.desc() if direction == SortDirection.DESC else column.asc())
        return DataList(
            self.model, query.order_by(*clauses, joined_columns=joined_columns), self.schema
        )

    def _sort_items(self, spec: Any) -> list[Any]:
        if isinstance(spec, ClauseElement):
            return [spec]
        if isinstance(spec, str):
            return [self._parse_sort_term(term) for term in spec.split(",") if term.strip()]
        if isinstance(spec, Mapping):
            return [(name, self._direction(direction)) for name, direction in spec.items()]
        items: list[Any] = []
        for entry in spec:
            if isinstance(entry, ClauseElement):
                items.append(entry)
            else:
                items.append(self._parse_sort_term(str(entry)))
        return items

    def _parse_sort_term(self, term: str) -> tuple[str, SortDirection]:
        parts = term.split()
        if len(parts) == 1:
            return parts[0], SortDirection.ASC
        if len(parts) == 2:
            return parts[0], self._direction(parts[1])
        raise InvalidArgumentException(f"Invalid sort term: {term!r}", "sort")

    @staticmethod
    def _direction(direction: str) -> SortDirection:
        try:
            return SortDirection(str(direction).strip().upper())
        except ValueError:
            raise InvalidArgumentException(
                f"Invalid sort direction {direction!r}; use ASC or DESC", "sort"
            ) from None

    def filter(self, **equalities: Any) -> DataList:
        """Restrict to records whose columns equal the given values."""
        clauses = [
            self.schema.field_column(self.model, name) == value
            for name, value in equalities.items()
        ]
        return self.alter_data_query(lambda q: q.where(*clauses))

    def statement(self) -> Select:
        return self._query.statement()

    def sql(self, dialect: Dialect | None = None) -> str:
        """Compiled SQL with bound values inlined (for logging and tests)."""
        compiled = self.statement().compile(
            dialect=dialect, compile_kwargs={"literal_binds": True}
        )
        return str(compiled)

    @traced("cmscore.orm.data_list.all")
    async def all(self, session: AsyncSession) -> list[Any]:
        """Execute and return all records."""
        result = await session.execute(self.statement())
        return list(result.scalars().unique().all())

    @traced("cmscore.orm.data_list.first")
    async def first(self, session: AsyncSession) -> Any | None:
        """Execute with LIMIT 1 and return the first record, or None."""
        result = await session.execute(self.statement().limit(1))
        return result.scalars().first()

    @traced("cmscore.orm.data_list.count")
    async def count(self, session: AsyncSession) -> int:
        """Count matching records, ignoring limit, offset and ordering."""
        inner = self.statement().limit(None).offset(None).order_by(None).subquery()
        result = await session.execute(select(func.count()).select_from(inner))
        return result.scalar() or 0

    def __repr__(self) -> str:
        return f"<DataList {self.model.__name__}>"
