"""The field model: one form input and its declarative specs.

A field's validation spec and error spec arrive as JSON object literals
(for example the `data-validate` and `data-error` attributes of an HTML
input). They are decoded exactly once, when the field is built, into plain
`Dict[str, str]` values. A spec that cannot be decoded leaves an empty
mapping behind and a `MalformedSpecError` on the field, so the orchestrator
can apply its policy without touching the raw text again.
"""

import json
import logging
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, List, Optional, Set, Tuple

from .exceptions import MalformedSpecError

logger = logging.getLogger(__name__)

VALIDATE_ATTRIBUTE = "data-validate"
ERROR_ATTRIBUTE = "data-error"


@dataclass
class Label:
    """A label element shown in front of a field."""
    text: str
    for_id: Optional[str] = None
    classes: Set[str] = dataclass_field(default_factory=set)


@dataclass
class FieldContainer:
    """The element wrapping a field, as far as error presentation cares.

    Attributes:
        classes: CSS classes of the wrapping element.
        label: The label that is the container's first child, if any.
        saved_label_text: Original text of a pre-existing label while an
            error message is shown in its place.
        owns_label: True when `label` was created to show an error.
    """
    classes: Set[str] = dataclass_field(default_factory=set)
    label: Optional[Label] = None
    saved_label_text: Optional[str] = None
    owns_label: bool = False


@dataclass(eq=False)
class Field:
    """One form input subject to validation.

    Fields compare by identity: two inputs with the same id are still two
    inputs.
    """
    field_id: str
    value: str = ""
    validation_spec: Dict[str, str] = dataclass_field(default_factory=dict)
    error_spec: Dict[str, str] = dataclass_field(default_factory=dict)
    validation_spec_error: Optional[MalformedSpecError] = None
    error_spec_error: Optional[MalformedSpecError] = None
    container: FieldContainer = dataclass_field(default_factory=FieldContainer)
    tag: str = "input"

    @classmethod
    def from_attributes(
        cls,
        field_id: str,
        value: Optional[str] = None,
        validate: Optional[str] = None,
        error: Optional[str] = None,
        container: Optional[FieldContainer] = None,
        tag: str = "input",
        validate_attribute: str = VALIDATE_ATTRIBUTE,
        error_attribute: str = ERROR_ATTRIBUTE,
    ) -> "Field":
        """Builds a field from raw, string-encoded attribute values.

        Args:
            field_id: The input's id.
            value: The input's current value. None reads as "".
            validate: Raw validation spec text, or None when absent.
            error: Raw error spec text, or None when absent.
            container: The presentational container of the input.
            tag: The element name the field came from.
            validate_attribute: Attribute name used in diagnostics.
            error_attribute: Attribute name used in diagnostics.

        Returns:
            Field: The field, with any decoding failure recorded on it.
        """
        validation_spec, validation_problem = decode_spec(field_id, validate_attribute, validate)
        error_spec, error_problem = decode_spec(field_id, error_attribute, error)

        for problem in (validation_problem, error_problem):
            if problem is not None:
                logger.warning(f"{problem}; the spec will be ignored")

        return cls(
            field_id=field_id,
            value=value or "",
            validation_spec=validation_spec,
            error_spec=error_spec,
            validation_spec_error=validation_problem,
            error_spec_error=error_problem,
            container=container if container is not None else FieldContainer(),
            tag=tag,
        )

    @property
    def spec_errors(self) -> List[MalformedSpecError]:
        """All decoding failures recorded for this field."""
        return [p for p in (self.validation_spec_error, self.error_spec_error) if p is not None]

    def __str__(self) -> str:
        return f"{self.tag}#{self.field_id}"


def decode_spec(field_id: str, attribute: str, raw: Optional[str]) -> Tuple[Dict[str, str], Optional[MalformedSpecError]]:
    """Decodes one string-encoded spec into a name to message mapping.

    A missing attribute, an empty string, and the JSON literal `null` all
    mean "no spec". Anything that is not a JSON object whose values are
    strings is malformed.

    Args:
        field_id: The owning field's id, for diagnostics.
        attribute: The attribute the text came from, for diagnostics.
        raw: The attribute text, or None.

    Returns:
        A tuple of the decoded mapping (empty on failure) and the decoding
        problem, if any.
    """
    if raw is None or not raw.strip():
        return {}, None

    try:
        decoded: Any = json.loads(raw)
    except json.JSONDecodeError as e:
        return {}, MalformedSpecError(field_id, attribute, raw, f"invalid JSON ({e.msg})")
    except RecursionError:
        return {}, MalformedSpecError(field_id, attribute, raw, "JSON nested too deeply")

    if decoded is None:
        return {}, None
    if not isinstance(decoded, dict):
        return {}, MalformedSpecError(field_id, attribute, raw, f"expected a JSON object, got {type(decoded).__name__}")

    bad_keys = [key for key, message in decoded.items() if not isinstance(message, str)]
    if bad_keys:
        return {}, MalformedSpecError(field_id, attribute, raw, f"non-string messages for {', '.join(bad_keys)}")

    return dict(decoded), None
