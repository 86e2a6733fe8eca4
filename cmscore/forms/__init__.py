"""Form structure used by search contexts and admin scaffolding."""

from cmscore.forms.field_list import FieldList
from cmscore.forms.fields import (
    CheckboxField,
    DateField,
    DropdownField,
    FormField,
    NumericField,
    TextField,
    title_from_name,
)

__all__ = [
    "CheckboxField",
    "DateField",
    "DropdownField",
    "FieldList",
    "FormField",
    "NumericField",
    "TextField",
    "title_from_name",
]
