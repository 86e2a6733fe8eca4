"""Ordered collection of form fields, addressed by name."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from cmscore.forms.fields import FormField


class FieldList:
    """Ordered form fields; names are unique (pushing a duplicate replaces it in place)."""

    def __init__(self, fields: Iterable[FormField] = ()) -> None:
        self._fields: list[FormField] = []
        for form_field in fields:
            self.push(form_field)

    def push(self, form_field: FormField) -> None:
        """Append form_field, or replace the existing field of the same name."""
        for index, existing in enumerate(self._fields):
            if existing.name == form_field.name:
                self._fields[index] = form_field
                return
        self._fields.append(form_field)

    def remove_by_name(self, name: str) -> None:
        """Remove the field called name; no-op when absent."""
        self._fields = [f for f in self._fields if f.name != name]

    def field_by_name(self, name: str) -> FormField | None:
        for form_field in self._fields:
            if form_field.name == name:
                return form_field
        return None

    def names(self) -> list[str]:
        return [f.name for f in self._fields]

    def data_field_names(self) -> list[str]:
        """Names of fields that submit data."""
        return [f.name for f in self._fields if f.has_data()]

    def __iter__(self) -> Iterator[FormField]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self._fields)

    def __repr__(self) -> str:
        return f"<FieldList {self.names()}>"
