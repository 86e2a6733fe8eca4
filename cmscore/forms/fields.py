"""Search form fields (structure only; rendering belongs to the admin UI)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, ClassVar

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def title_from_name(name: str) -> str:
    """'author__first_name' -> 'Author first name'; 'FirstName' -> 'First name'."""
    text = _CAMEL_BOUNDARY.sub(" ", name.replace("__", " ").replace("_", " "))
    text = " ".join(text.split()).lower()
    return text[:1].upper() + text[1:]


@dataclass
class FormField:
    """A named input; name doubles as the request parameter key."""

    name: str
    title: str | None = None
    value: Any = None

    field_type: ClassVar[str] = "text"

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("FormField name must be a non-empty string")
        if self.title is None:
            self.title = title_from_name(self.name)

    def has_data(self) -> bool:
        """True for fields that submit a value (all built-in types do)."""
        return True


@dataclass
class TextField(FormField):
    max_length: int | None = None


@dataclass
class NumericField(FormField):
    field_type: ClassVar[str] = "number"


@dataclass
class CheckboxField(FormField):
    field_type: ClassVar[str] = "checkbox"


@dataclass
class DateField(FormField):
    field_type: ClassVar[str] = "date"


@dataclass
class DropdownField(FormField):
    """Select box; source maps submitted values to labels."""

    source: dict[str, str] = field(default_factory=dict)
    empty_string: str = ""

    field_type: ClassVar[str] = "dropdown"
