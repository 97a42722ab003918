"""
Message value objects for Herald.

Messages are plain data holders. Transports decide whether they can
deliver one via isinstance checks in supports().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Message(Protocol):
    """
    Protocol every message type satisfies.

    Attributes:
        subject: Text body of the message
        transport: Logical channel name to route through (optional)
    """

    subject: str
    transport: str | None

    @property
    def recipient_id(self) -> str | None:
        ...


@dataclass
class SmsMessage:
    """
    An SMS to a single phone number.

    Attributes:
        phone: Recipient phone number (E.164, "+" prefix allowed)
        subject: SMS text
        transport: Named transport to route through (optional)
    """

    phone: str
    subject: str
    transport: str | None = None

    def __post_init__(self) -> None:
        if not self.phone:
            raise ValueError("SmsMessage requires a phone number")

    @property
    def recipient_id(self) -> str:
        return self.phone

    def to_dict(self) -> dict[str, Any]:
        return {
            "phone": self.phone,
            "subject": self.subject,
            "transport": self.transport,
        }


@dataclass
class ChatMessage:
    """
    A message for a chat service.

    Attributes:
        subject: Message content (markdown where the service supports it)
        options: Service-specific options (chat_id, topic, ...)
        transport: Named transport to route through (optional)
    """

    subject: str
    options: dict[str, Any] = field(default_factory=dict)
    transport: str | None = None

    @property
    def recipient_id(self) -> str | None:
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject": self.subject,
            "options": self.options,
            "transport": self.transport,
        }


@dataclass(frozen=True, slots=True)
class SentMessage:
    """
    Result of a successful send.

    Attributes:
        original_message: The message that was delivered
        transport: describe() of the transport that delivered it
        message_id: Vendor-assigned identifier (if available)
    """

    original_message: Any
    transport: str
    message_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "transport": self.transport,
            "message_id": self.message_id,
            "message": self.original_message.to_dict()
            if hasattr(self.original_message, "to_dict")
            else repr(self.original_message),
        }
