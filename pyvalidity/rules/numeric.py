"""Rules for values that must read as numbers."""
import re

from ..core.base_rule import BaseRule

_NUMERIC = re.compile(r"[-+]?[0-9]+")
# No leading zeros, so "007" is numeric but not an int.
_INT = re.compile(r"[-+]?(?:0|[1-9][0-9]*)")
_FLOAT = re.compile(r"[-+]?(?:[0-9]+)?(?:\.[0-9]*)?(?:[eE][-+]?[0-9]+)?")


class NumericRule(BaseRule):
    name = "numeric"
    category = "Number"
    description = "An optionally signed run of digits."

    def check(self, value: str) -> bool:
        return _NUMERIC.fullmatch(value) is not None


class IntRule(BaseRule):
    name = "int"
    category = "Number"
    description = "An optionally signed integer without leading zeros."

    def check(self, value: str) -> bool:
        return _INT.fullmatch(value) is not None


class FloatRule(BaseRule):
    """Decimal numbers such as `3`, `-0.5`, `.5`, `1.` or `2e10`.

    The float pattern makes every part optional, so a value must also
    contain at least one digit before the exponent to count.
    """
    name = "float"
    category = "Number"
    description = "An optionally signed decimal number with optional exponent."

    def check(self, value: str) -> bool:
        if _FLOAT.fullmatch(value) is None:
            return False
        mantissa = re.split(r"[eE]", value, maxsplit=1)[0]
        return any(ch.isdigit() for ch in mantissa)
