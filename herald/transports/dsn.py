"""
DSN parsing for Herald.

A DSN describes one destination service:

    scheme://[user[:password]@]host[:port][/path][?key=value&...]

The host may be a routing placeholder ("default") rather than a real
network host; factories map "default" to the vendor's public endpoint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from urllib.parse import parse_qsl, unquote, urlencode, urlsplit

from ..exceptions import IncompleteDsnError, MalformedDsnError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Dsn:
    """
    Parsed connection string.

    Immutable. Build one with Dsn.parse(); the constructor does no
    validation.

    Attributes:
        scheme: Lowercase scheme, selects the factory
        host: Network host or routing placeholder
        port: Explicit port (if any)
        user: Decoded user part (None when absent or empty)
        password: Decoded password part (None when absent)
        path: Path including the leading "/" (None when absent)
        options: Query parameters; the last occurrence of a key wins
        original: The string this DSN was parsed from
    """

    scheme: str
    host: str
    port: int | None = None
    user: str | None = field(default=None, repr=False)
    password: str | None = field(default=None, repr=False)
    path: str | None = None
    options: dict[str, str] = field(default_factory=dict)
    original: str = field(default="", repr=False, compare=False)

    @classmethod
    def parse(cls, raw: str) -> Dsn:
        """
        Parse a DSN string.

        Raises:
            MalformedDsnError: If the string does not match the grammar
        """
        raw = raw.strip()
        if "://" not in raw:
            raise MalformedDsnError(raw, 'a scheme followed by "://" is required')

        try:
            parts = urlsplit(raw)
        except ValueError as e:
            raise MalformedDsnError(raw, str(e)) from e
        if not parts.scheme or not raw.lower().startswith(f"{parts.scheme}://"):
            raise MalformedDsnError(raw, "the scheme is missing or invalid")

        host = parts.hostname
        if not host:
            raise MalformedDsnError(raw, "the host is missing")

        try:
            port = parts.port
        except ValueError as e:
            raise MalformedDsnError(raw, f"the port is invalid ({e})") from e

        user = unquote(parts.username) if parts.username else None
        password = unquote(parts.password) if parts.password is not None else None

        options = dict(parse_qsl(parts.query, keep_blank_values=True))

        dsn = cls(
            scheme=parts.scheme,
            host=host,
            port=port,
            user=user,
            password=password,
            path=parts.path or None,
            options=options,
            original=raw,
        )
        logger.debug(f"Parsed DSN: {dsn.describe()}")
        return dsn

    def get_option(self, key: str, default: str | None = None) -> str | None:
        return self.options.get(key, default)

    def get_required_option(self, key: str) -> str:
        """
        Get an option that must be present and non-empty.

        Raises:
            IncompleteDsnError: If the option is missing or empty
        """
        value = self.options.get(key)
        if not value:
            raise IncompleteDsnError(self, key)
        return value

    def describe(self) -> str:
        """
        Rebuild the DSN without credentials.

        The result is deterministic and parses back to an equal Dsn
        minus user and password.
        """
        host = f"[{self.host}]" if ":" in self.host else self.host
        result = f"{self.scheme}://{host}"
        if self.port is not None:
            result += f":{self.port}"
        if self.path:
            result += self.path
        if self.options:
            result += "?" + urlencode(self.options)
        return result

    def __str__(self) -> str:
        return self.describe()


def parse_dsn(raw: str) -> Dsn:
    """Shorthand for Dsn.parse()."""
    return Dsn.parse(raw)
