"""Character-class rules for plain text values.

All of these operate on ASCII character classes. `lowercase` and
`uppercase` compare the value with its case-folded form, so digits and
punctuation pass both, as does the empty string.
"""
import re

from ..core.base_rule import BaseRule

_ALPHA = re.compile(r"[A-Za-z]+")
_ALPHANUMERIC = re.compile(r"[A-Za-z0-9]+")
_HEXADECIMAL = re.compile(r"[0-9A-Fa-f]+")
_HEX_COLOR = re.compile(r"#?(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})")


class AlphaRule(BaseRule):
    name = "alpha"
    category = "Text"
    description = "Letters only (a-z, A-Z)."

    def check(self, value: str) -> bool:
        return _ALPHA.fullmatch(value) is not None


class AlphanumericRule(BaseRule):
    name = "alphanumeric"
    category = "Text"
    description = "Letters and digits only."

    def check(self, value: str) -> bool:
        return _ALPHANUMERIC.fullmatch(value) is not None


class HexadecimalRule(BaseRule):
    name = "hexadecimal"
    category = "Text"
    description = "Hexadecimal digits only."

    def check(self, value: str) -> bool:
        return _HEXADECIMAL.fullmatch(value) is not None


class HexColorRule(BaseRule):
    name = "hexColor"
    category = "Text"
    description = "A 3 or 6 digit hex color, with or without a leading '#'."

    def check(self, value: str) -> bool:
        return _HEX_COLOR.fullmatch(value) is not None


class LowercaseRule(BaseRule):
    name = "lowercase"
    category = "Text"
    description = "No uppercase characters."

    def check(self, value: str) -> bool:
        return value == value.lower()


class UppercaseRule(BaseRule):
    name = "uppercase"
    category = "Text"
    description = "No lowercase characters."

    def check(self, value: str) -> bool:
        return value == value.upper()
