"""Checks that a value reads as a calendar date.

A value is a date when it parses as ISO 8601 (`2014-03-01`,
`2014-03-01T10:00:00`), as an RFC 2822 timestamp
(`Sat, 01 Mar 2014 10:00:00 +0000`), or with any of the `strftime`
patterns configured under `rules.date.formats`.
"""
from datetime import datetime
from email.utils import parsedate_to_datetime

from ..core.base_rule import BaseRule

DEFAULT_FORMATS = ["%m/%d/%Y", "%Y/%m/%d", "%d %B %Y", "%B %d, %Y", "%b %d, %Y", "%d %b %Y"]


class DateRule(BaseRule):
    name = "date"
    category = "Date"
    description = "A date in ISO 8601, RFC 2822 or one of the configured formats."

    def __init__(self, config=None) -> None:
        super().__init__(config)
        self.formats = list(self.setting("formats", DEFAULT_FORMATS))

    def check(self, value: str) -> bool:
        text = value.strip()
        if not text:
            return False

        try:
            datetime.fromisoformat(text)
            return True
        except ValueError:
            pass

        for fmt in self.formats:
            try:
                datetime.strptime(text, fmt)
                return True
            except ValueError:
                continue

        try:
            parsedate_to_datetime(text)
            return True
        except (TypeError, ValueError, IndexError):
            return False
