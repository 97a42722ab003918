"""
Round-robin Transport for Herald.

Spreads volume across transports (rate limits, cost, several vendor
accounts). A failing child is skipped and the next one is tried within
the same call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .composite import CompositeTransport

if TYPE_CHECKING:
    from .protocol import Transport


class RoundRobinTransport(CompositeTransport):
    """
    Rotates the starting transport on every call.

    With [A, B] both healthy: call 1 uses A, call 2 uses B, call 3 uses A.

    The cursor is claimed and advanced under a lock before sending, so
    concurrent callers start from different children. The lock is not
    held while a child sends.
    """

    NAME = "roundrobin"

    def __init__(self, transports: Sequence[Transport], retry_period: float = 0.0):
        super().__init__(transports, retry_period)
        self._cursor = 0

    @property
    def cursor(self) -> int:
        """Index the next call starts from."""
        return self._cursor

    def _start_index(self) -> int:
        with self._lock:
            start = self._cursor
            self._cursor = (start + 1) % len(self._transports)
            return start

    def _on_success(self, index: int) -> None:
        with self._lock:
            self._cursor = (index + 1) % len(self._transports)
