"""Checks payment card numbers.

Spaces and dashes are ignored. The remaining digits must match the length
and prefix layout of a known card network and pass the Luhn checksum.
"""
import re

from ..core.base_rule import BaseRule

_CARD_LAYOUT = re.compile(
    r"(?:4[0-9]{12}(?:[0-9]{3})?"  # Visa
    r"|5[1-5][0-9]{14}"  # MasterCard
    r"|6(?:011|5[0-9][0-9])[0-9]{12}"  # Discover
    r"|3[47][0-9]{13}"  # American Express
    r"|3(?:0[0-5]|[68][0-9])[0-9]{11}"  # Diners Club
    r"|(?:2131|1800|35[0-9]{3})[0-9]{11})"  # JCB
)


def luhn_checksum_ok(digits: str) -> bool:
    """Returns True if the digit string passes the Luhn (mod 10) check."""
    total = 0
    for index, ch in enumerate(reversed(digits)):
        n = int(ch)
        if index % 2 == 1:
            n *= 2
            if n > 9:
                n -= 9
        total += n
    return total % 10 == 0


class CreditCardRule(BaseRule):
    name = "creditCard"
    category = "Payment"
    description = "A credit card number from a known network with a valid checksum."

    def check(self, value: str) -> bool:
        digits = re.sub(r"[\s-]", "", value)
        if _CARD_LAYOUT.fullmatch(digits) is None:
            return False
        return luhn_checksum_ok(digits)
