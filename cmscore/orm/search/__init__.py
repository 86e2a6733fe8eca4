"""Search contexts: submitted parameters in, filtered DataList out."""

from cmscore.orm.search.search_context import SearchContext
from cmscore.orm.search.scaffolding import (
    default_search_context,
    default_search_filters,
    scaffold_search_fields,
)

__all__ = [
    "SearchContext",
    "default_search_context",
    "default_search_filters",
    "scaffold_search_fields",
]
