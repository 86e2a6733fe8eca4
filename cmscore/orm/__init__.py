"""Data layer: schema lookups, composable queries, filters and search."""

from cmscore.orm.data_list import DataList
from cmscore.orm.data_query import DataQuery
from cmscore.orm.database import Base
from cmscore.orm.field_path import FieldPath
from cmscore.orm.schema import DataObjectSchema, get_schema

__all__ = [
    "Base",
    "DataList",
    "DataObjectSchema",
    "DataQuery",
    "FieldPath",
    "get_schema",
]
