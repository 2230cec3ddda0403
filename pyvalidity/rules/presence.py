"""Checks that a field has been filled in."""
from ..core.base_rule import BaseRule


class RequiredRule(BaseRule):
    """Passes when the value is not empty.

    Whitespace counts as content, so `" "` passes.
    """
    name = "required"
    category = "Presence"
    description = "The field must not be empty."

    def check(self, value: str) -> bool:
        return len(value) > 0
