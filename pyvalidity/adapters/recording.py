"""An adapter that records error state in memory instead of presenting it."""

from typing import Dict, List, Optional, Tuple

from ..core.adapter import ErrorStateAdapter
from ..core.field import Field


class RecordingAdapter(ErrorStateAdapter):
    """Keeps the current message per field id plus an ordered call log.

    Attributes:
        errors (Dict[str, str]): Field id to the message currently shown.
        calls (List[Tuple[str, str, Optional[str]]]): Every call received,
            as ("set", field_id, message) or ("clear", field_id, None).
    """

    def __init__(self) -> None:
        self.errors: Dict[str, str] = {}
        self.calls: List[Tuple[str, str, Optional[str]]] = []

    def set_error(self, field: Field, message: str) -> None:
        self.calls.append(("set", field.field_id, message))
        self.errors[field.field_id] = message

    def clear_error(self, field: Field) -> None:
        self.calls.append(("clear", field.field_id, None))
        self.errors.pop(field.field_id, None)

    def has_error(self, field_id: str) -> bool:
        return field_id in self.errors

    def message_for(self, field_id: str) -> Optional[str]:
        return self.errors.get(field_id)

    def set_calls(self) -> List[Tuple[str, str]]:
        """Returns the (field_id, message) pairs passed to `set_error`, in order."""
        return [(field_id, message) for kind, field_id, message in self.calls if kind == "set"]

    def reset(self) -> None:
        self.errors.clear()
        self.calls.clear()
