"""Shared enumerations for cmscore.

Cross-cutting enums used by control, orm and search layers.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class EnvironmentType(_ValuesMixin, str, Enum):
    """Deployment environment; controls error page and redirect diagnostics."""

    DEV = "dev"
    TEST = "test"
    LIVE = "live"


class Connective(_ValuesMixin, str, Enum):
    """Logical operator joining search filter predicates. Only AND is implemented."""

    AND = "AND"
    OR = "OR"


class SortDirection(_ValuesMixin, str, Enum):
    """Column sort direction."""

    ASC = "ASC"
    DESC = "DESC"


class FilterModifier(_ValuesMixin, str, Enum):
    """Modifiers accepted by search filters (e.g. 'PartialMatch:nocase')."""

    NOT = "not"
    CASE = "case"
    NOCASE = "nocase"


class FilterKind(_ValuesMixin, str, Enum):
    """Every search filter strategy (see cmscore.orm.filters.registry)."""

    EXACT_MATCH = "ExactMatch"
    PARTIAL_MATCH = "PartialMatch"
    STARTS_WITH = "StartsWith"
    ENDS_WITH = "EndsWith"
    GREATER_THAN = "GreaterThan"
    GREATER_THAN_OR_EQUAL = "GreaterThanOrEqual"
    LESS_THAN = "LessThan"
    LESS_THAN_OR_EQUAL = "LessThanOrEqual"
    WITHIN_RANGE = "WithinRange"
