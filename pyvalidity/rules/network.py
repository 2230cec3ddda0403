"""Rules for addresses: e-mail addresses, URLs and IP addresses.

Host names are accepted only when fully qualified (at least one dot and an
alphabetic top-level domain), which is what rejects values like
`wwwgithubcom` or `user@localhost`.
"""
import ipaddress
import re
from urllib.parse import urlsplit

from ..core.base_rule import BaseRule

_EMAIL_LOCAL = re.compile(r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*")
_HOST_LABEL = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?")
_TLD = re.compile(r"[A-Za-z]{2,63}")

MAX_URL_LENGTH = 2083
DEFAULT_PROTOCOLS = ["http", "https", "ftp"]


def is_fqdn(host: str) -> bool:
    """Returns True if `host` is a fully qualified domain name."""
    if not host or len(host) > 253:
        return False
    labels = host.rstrip(".").split(".")
    if len(labels) < 2 or not _TLD.fullmatch(labels[-1]):
        return False
    return all(_HOST_LABEL.fullmatch(label) for label in labels)


def is_ip(value: str) -> bool:
    """Returns True if `value` is an IPv4 or IPv6 address."""
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


class EmailRule(BaseRule):
    name = "email"
    category = "Network"
    description = "An e-mail address such as user@example.com."

    def check(self, value: str) -> bool:
        local, sep, domain = value.rpartition("@")
        if not sep or len(local) > 64:
            return False
        return _EMAIL_LOCAL.fullmatch(local) is not None and is_fqdn(domain)


class URLRule(BaseRule):
    """Accepts web addresses, with or without a protocol.

    Settings (`rules.URL`):
        protocols: schemes accepted when one is given.
        require_protocol: reject values that do not start with `<scheme>://`.
    """
    name = "URL"
    aliases = ("url",)
    category = "Network"
    description = "A URL with a fully qualified host or an IP address."

    def __init__(self, config=None) -> None:
        super().__init__(config)
        self.protocols = [p.lower() for p in self.setting("protocols", DEFAULT_PROTOCOLS)]
        self.require_protocol = bool(self.setting("require_protocol", False))

    def check(self, value: str) -> bool:
        if not value or len(value) >= MAX_URL_LENGTH or any(ch.isspace() for ch in value):
            return False

        if "://" in value:
            scheme = value.split("://", 1)[0].lower()
            if scheme not in self.protocols:
                return False
        elif self.require_protocol:
            return False
        else:
            value = f"http://{value}"

        try:
            parts = urlsplit(value)
            host = parts.hostname
            parts.port  # Raises ValueError for out-of-range or non-numeric ports.
        except ValueError:
            return False

        if not host:
            return False
        return is_fqdn(host) or is_ip(host)


class IPRule(BaseRule):
    name = "IP"
    aliases = ("ip",)
    category = "Network"
    description = "An IPv4 or IPv6 address."

    def check(self, value: str) -> bool:
        return is_ip(value)
