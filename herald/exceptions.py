"""
Exceptions for Herald.

Resolution-time errors (malformed DSN, unknown scheme, missing option) are
all ConfigurationError subclasses and always reach the caller. Send-time
TransportError is the only error a composite transport recovers from.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Sequence

if TYPE_CHECKING:
    import httpx

    from .transports.dsn import Dsn


class HeraldError(Exception):
    """Base class for every error raised by Herald."""

    pass


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(HeraldError):
    """
    Raised when a transport cannot be built from its configuration.

    Never retried: the DSN or channel mapping has to be fixed.
    """

    pass


class MalformedDsnError(ConfigurationError):
    """Raised when a DSN string does not match the DSN grammar."""

    def __init__(self, raw: str, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f'The "{raw}" notifier DSN is invalid: {reason}.')


class UnsupportedSchemeError(ConfigurationError):
    """
    Raised when no registered factory claims a DSN's scheme.

    Carries the scheme and the schemes that would have been accepted,
    so misconfigured channels can be diagnosed from the message alone.
    """

    def __init__(self, dsn: Dsn, supported: Iterable[str] = ()):
        self.dsn = dsn
        self.scheme = dsn.scheme
        self.supported = list(supported)
        available = ", ".join(f'"{s}"' for s in self.supported) or "(none)"
        super().__init__(
            f'The "{self.scheme}" scheme is not supported. '
            f"Supported schemes: {available}"
        )


class IncompleteDsnError(ConfigurationError):
    """Raised when a factory recognizes a DSN but a required part is missing."""

    def __init__(self, dsn: Dsn | None, option: str, message: str | None = None):
        self.dsn = dsn
        self.option = option
        super().__init__(
            message or f'The option "{option}" is required but missing.'
        )


class UnknownTransportError(ConfigurationError):
    """Raised when a message names a transport the collection does not hold."""

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.name = name
        self.available = list(available)
        names = ", ".join(self.available) or "(none)"
        super().__init__(
            f'The "{name}" transport does not exist. Available: {names}'
        )


# =============================================================================
# Send-time Errors
# =============================================================================


class UnsupportedMessageTypeError(HeraldError):
    """
    Raised when a transport is asked to send a message it cannot handle.

    Callers are expected to check supports() first, so this indicates a
    routing bug rather than a delivery problem.
    """

    def __init__(
        self,
        transport: str,
        supported: str,
        given: Any,
        message: str | None = None,
    ):
        self.transport = transport
        self.supported = supported
        self.given = type(given).__name__
        super().__init__(
            message
            or f'The "{transport}" transport only supports instances of '
            f'"{supported}" (instance of "{self.given}" given).'
        )


class TransportError(HeraldError):
    """
    Raised when a delivery attempt fails.

    Covers network failures, vendor-reported errors and responses the
    bridge cannot understand. The vendor response, when there is one,
    is kept for debugging.
    """

    def __init__(
        self,
        message: str,
        response: httpx.Response | None = None,
        debug: str = "",
    ):
        super().__init__(message)
        self.response = response
        self.debug = debug
        if response is not None and not debug:
            self.debug = f"HTTP {response.status_code}: {response.text}"


class AllTransportsFailedError(TransportError):
    """
    Raised by composite transports when every supporting child failed.

    Keeps every child error in the order the children were tried.
    """

    def __init__(self, errors: Sequence[tuple[str, TransportError]]):
        self.errors = [error for _, error in errors]
        self.failures = list(errors)
        if self.failures:
            details = "; ".join(f"{name}: {error}" for name, error in self.failures)
            message = f"All transports failed: {details}"
        else:
            message = "All transports failed: no transport is currently available."
        super().__init__(message, debug="\n".join(e.debug for e in self.errors if e.debug))
