"""Structured paths to fields, possibly through relations.

Search forms cannot submit dots in parameter names, so relation paths
arrive as "comments__author__name". Splitting only on the double
underscore keeps single underscores inside segments: "first_name" is one
segment and "author__first_name" is ("author", "first_name").
"""

from __future__ import annotations

from dataclasses import dataclass

DOT = "."
PARAM_SEPARATOR = "__"


@dataclass(frozen=True)
class FieldPath:
    """Ordered, non-empty sequence of attribute names; all but the last are relations."""

    segments: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise ValueError("FieldPath must have at least one segment")
        for segment in self.segments:
            if not segment or not segment.strip():
                raise ValueError(f"FieldPath has an empty segment: {self.segments!r}")
            if DOT in segment:
                raise ValueError(f"FieldPath segment may not contain '.': {segment!r}")

    @classmethod
    def from_dotted(cls, name: str) -> FieldPath:
        """Parse 'author.name'. Raises ValueError on empty segments."""
        return cls(tuple(name.split(DOT)))

    @classmethod
    def from_param(cls, key: str) -> FieldPath:
        """Parse a request parameter name such as 'author__name'.

        A segment may itself contain single underscores; a run of three
        underscores splits before the last one ('a___b' -> ('a', '_b')).
        """
        if DOT in key:
            raise ValueError(f"Parameter name may not contain '.': {key!r}")
        return cls(tuple(key.split(PARAM_SEPARATOR)))

    @classmethod
    def try_from_param(cls, key: str) -> FieldPath | None:
        try:
            return cls.from_param(key)
        except ValueError:
            return None

    @classmethod
    def try_from_key(cls, key: str) -> FieldPath | None:
        """Parse a search key in either form: 'author.name' or 'author__name'."""
        try:
            return cls.from_dotted(key) if DOT in key else cls.from_param(key)
        except ValueError:
            return None

    @classmethod
    def coerce(cls, name: str | FieldPath) -> FieldPath:
        """Accept an existing FieldPath or a dotted string."""
        if isinstance(name, FieldPath):
            return name
        return cls.from_dotted(name)

    @property
    def dotted(self) -> str:
        return DOT.join(self.segments)

    @property
    def param(self) -> str:
        return PARAM_SEPARATOR.join(self.segments)

    @property
    def field(self) -> str:
        return self.segments[-1]

    @property
    def relation(self) -> tuple[str, ...]:
        return self.segments[:-1]

    @property
    def is_relation(self) -> bool:
        return len(self.segments) > 1

    def __str__(self) -> str:
        return self.dotted
