"""Exception types raised or reported by the validity engine."""


class ValidityError(Exception):
    """Base class for all validity errors."""


class FormNotFoundError(ValidityError, LookupError):
    """Raised when a form id does not match any form in the document."""

    def __init__(self, form_id: str) -> None:
        super().__init__(f"No form with id '{form_id}' exists in the document")
        self.form_id = form_id


class MalformedSpecError(ValidityError):
    """A declarative spec attribute that could not be decoded.

    Instances are not raised out of field construction. They are kept on the
    field (see `Field.spec_errors`) so the orchestrator can apply the
    configured policy without decoding the attribute again.
    """

    def __init__(self, field_id: str, attribute: str, raw: str, reason: str) -> None:
        super().__init__(f"Malformed '{attribute}' on field '{field_id}': {reason}")
        self.field_id = field_id
        self.attribute = attribute
        self.raw = raw
        self.reason = reason
