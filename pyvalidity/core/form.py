"""Forms and the document that holds them."""

from typing import Dict, Iterable, Iterator, List, Optional

from .exceptions import FormNotFoundError
from .field import Field


class Form:
    """An ordered, mutable collection of fields identified by an id.

    `fields` is the live list. Nothing caches it: every validation call
    takes its own `snapshot()` at the start, so fields added or removed
    between calls are always seen, and fields added during a call are not.
    """

    def __init__(self, form_id: str, fields: Optional[Iterable[Field]] = None) -> None:
        self.form_id = form_id
        self.fields: List[Field] = list(fields or [])

    def add_field(self, field: Field) -> Field:
        self.fields.append(field)
        return field

    def remove_field(self, field_id: str) -> None:
        self.fields = [f for f in self.fields if f.field_id != field_id]

    def get_field(self, field_id: str) -> Optional[Field]:
        """Returns the first field with `field_id`, or None."""
        for f in self.fields:
            if f.field_id == field_id:
                return f
        return None

    def snapshot(self) -> List[Field]:
        """Returns a copy of the current field list."""
        return list(self.fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self.fields)

    def __repr__(self) -> str:
        return f"Form({self.form_id!r}, {len(self.fields)} fields)"


class Document:
    """The lookup from form id to form."""

    def __init__(self, forms: Optional[Iterable[Form]] = None) -> None:
        self.forms: Dict[str, Form] = {}
        for form in forms or []:
            self.add_form(form)

    def add_form(self, form: Form) -> Form:
        self.forms[form.form_id] = form
        return form

    def get_form(self, form_id: str) -> Form:
        """Returns the form with `form_id`.

        Raises:
            FormNotFoundError: If no such form exists.
        """
        try:
            return self.forms[form_id]
        except KeyError:
            raise FormNotFoundError(form_id) from None

    def __contains__(self, form_id: object) -> bool:
        return form_id in self.forms

    def __repr__(self) -> str:
        return f"Document({sorted(self.forms)})"
