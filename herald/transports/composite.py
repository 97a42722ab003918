"""
Composite transport base for Herald.

Failover and round-robin share everything except where a scan starts
and what happens to the cursor afterwards:

- unsupported children are skipped and never count as failures
- a TransportError from a child is recorded and the scan moves on
- no supporting child at all -> UnsupportedMessageTypeError
- every supporting child failed -> AllTransportsFailedError with every
  child error, in the order they were tried

Children are never mutated; the only state a composite changes is its
own (cursor, cooldown bookkeeping), always under self._lock.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Sequence

from ..exceptions import (
    AllTransportsFailedError,
    TransportError,
    UnsupportedMessageTypeError,
)

if TYPE_CHECKING:
    from ..messages import SentMessage
    from .protocol import Transport

logger = logging.getLogger(__name__)


class CompositeTransport(ABC):
    """
    Transport wrapping an ordered list of transports.

    Args:
        transports: Children, in priority order
        retry_period: Seconds a failed child is skipped on later calls.
            0 (default) only skips it for the rest of the failing call.
    """

    NAME: ClassVar[str] = "composite"

    def __init__(self, transports: Sequence[Transport], retry_period: float = 0.0):
        if not transports:
            raise ValueError(f"{self.__class__.__name__} requires at least one transport")
        if retry_period < 0:
            raise ValueError("retry_period must be >= 0")

        self._transports: tuple[Transport, ...] = tuple(transports)
        self._retry_period = retry_period
        self._lock = threading.Lock()
        self._failed_at: dict[int, float] = {}

    @property
    def transports(self) -> tuple[Transport, ...]:
        return self._transports

    @property
    def retry_period(self) -> float:
        return self._retry_period

    def supports(self, message: Any) -> bool:
        return any(transport.supports(message) for transport in self._transports)

    def describe(self) -> str:
        children = " ".join(t.describe() for t in self._transports)
        return f"{self.NAME}({children})"

    @abstractmethod
    def _start_index(self) -> int:
        """Index the next scan starts from."""
        pass

    def _on_success(self, index: int) -> None:
        """Called after the child at index delivered a message."""
        pass

    def send(self, message: Any) -> SentMessage:
        count = len(self._transports)
        start = self._start_index()
        failures: list[tuple[str, TransportError]] = []
        supported = False

        for offset in range(count):
            index = (start + offset) % count
            transport = self._transports[index]

            if not transport.supports(message):
                continue
            supported = True

            if self._is_cooling_down(index):
                logger.debug(f"[{self.NAME}] Skipping {transport.describe()}: cooling down")
                continue

            try:
                sent_message = transport.send(message)
            except TransportError as e:
                logger.warning(f"[{self.NAME}] {transport.describe()} failed: {e}")
                failures.append((transport.describe(), e))
                self._mark_failed(index)
                continue

            self._on_success(index)
            return sent_message

        if not supported:
            raise UnsupportedMessageTypeError(
                self.describe(),
                "any message type supported by its transports",
                message,
                message=(
                    f'None of the "{self.describe()}" transports support '
                    f'"{type(message).__name__}" messages.'
                ),
            )

        logger.error(f"[{self.NAME}] All transports failed ({len(failures)} attempted)")
        raise AllTransportsFailedError(failures)

    def _is_cooling_down(self, index: int) -> bool:
        if not self._retry_period:
            return False
        with self._lock:
            failed_at = self._failed_at.get(index)
            if failed_at is None:
                return False
            if time.monotonic() - failed_at >= self._retry_period:
                del self._failed_at[index]
                return False
            return True

    def _mark_failed(self, index: int) -> None:
        if not self._retry_period:
            return
        with self._lock:
            self._failed_at[index] = time.monotonic()

    def close(self) -> None:
        """Close every child that holds resources."""
        for transport in self._transports:
            close = getattr(transport, "close", None)
            if callable(close):
                close()

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self.describe()}')"
