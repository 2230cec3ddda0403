"""The built-in validation rules.

This package contains every rule implementation that is discovered by the
rule registry. Each module in this package should contain one or more
classes that inherit from `pyvalidity.core.base_rule.BaseRule`.
"""
from .presence import RequiredRule
from .network import EmailRule, URLRule, IPRule
from .text import (
    AlphaRule,
    AlphanumericRule,
    HexadecimalRule,
    HexColorRule,
    LowercaseRule,
    UppercaseRule,
)
from .numeric import NumericRule, IntRule, FloatRule
from .date import DateRule
from .payment import CreditCardRule
