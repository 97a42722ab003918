"""
Send lifecycle events for Herald.

Every vendor transport dispatches:
- MessageEvent: before the send attempt
- SentMessageEvent: after a successful send
- FailedMessageEvent: when the attempt raised (the error is re-raised)

Dispatching is fire-and-forget: a failing listener is logged and never
affects delivery.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .messages import SentMessage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessageEvent:
    """A message is about to be sent."""

    message: Any


@dataclass(frozen=True)
class SentMessageEvent:
    """A message was delivered."""

    sent_message: SentMessage

    @property
    def message(self) -> Any:
        return self.sent_message.original_message


@dataclass(frozen=True)
class FailedMessageEvent:
    """A send attempt raised."""

    message: Any
    error: Exception


@runtime_checkable
class EventDispatcher(Protocol):
    """Anything that can receive send lifecycle events."""

    def dispatch(self, event: object) -> None:
        ...


Listener = Callable[[Any], None]


class SimpleEventDispatcher:
    """
    In-process dispatcher keyed by event type.

    Example:
        dispatcher = SimpleEventDispatcher()
        dispatcher.add_listener(FailedMessageEvent, alert_on_failure)

        transport = TransportResolver.from_dsn(dsn, dispatcher=dispatcher)
    """

    def __init__(self) -> None:
        self._listeners: dict[type, list[Listener]] = defaultdict(list)

    def add_listener(self, event_type: type, listener: Listener) -> None:
        self._listeners[event_type].append(listener)

    def remove_listener(self, event_type: type, listener: Listener) -> bool:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)
            return True
        return False

    def dispatch(self, event: object) -> None:
        for listener in list(self._listeners.get(type(event), [])):
            try:
                listener(event)
            except Exception as e:
                logger.error(
                    f"Listener {listener!r} failed for {type(event).__name__}: {e}",
                    exc_info=True,
                )
