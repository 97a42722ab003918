"""
Telegram Transport for Herald.

Posts chat messages through the Telegram Bot API.

DSN:
    telegram://BOT_TOKEN@default?channel=CHAT_ID

Bot tokens contain a colon ("123456:ABC..."), which the DSN grammar
splits into user and password; both halves are joined back.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import TransportError
from ..messages import ChatMessage, SentMessage
from ..transports.protocol import BaseTransport, BaseTransportFactory

if TYPE_CHECKING:
    import httpx

    from ..events import EventDispatcher
    from ..transports.dsn import Dsn

logger = logging.getLogger(__name__)


class TelegramTransport(BaseTransport):
    """
    Telegram bot transport.

    Message options:
        chat_id: Overrides the DSN channel for this message
        parse_mode: "Markdown" (default), "MarkdownV2" or "HTML"
    """

    HOST = "api.telegram.org"
    SCHEME = "telegram"
    MESSAGE_TYPE = ChatMessage

    def __init__(
        self,
        token: str,
        chat_channel: str | None = None,
        client: httpx.Client | None = None,
        dispatcher: EventDispatcher | None = None,
    ):
        super().__init__(client, dispatcher)
        self._token = token
        self._chat_channel = chat_channel

    def describe(self) -> str:
        if self._chat_channel is None:
            return f"telegram://{self.endpoint}"
        return f"telegram://{self.endpoint}?channel={self._chat_channel}"

    def _do_send(self, message: ChatMessage) -> SentMessage:
        chat_id = message.options.get("chat_id") or self._chat_channel
        if not chat_id:
            raise TransportError(
                "Unable to post the Telegram message: no chat_id option and no channel configured."
            )

        response = self.client.post(
            f"https://{self.endpoint}/bot{self._token}/sendMessage",
            json={
                "chat_id": chat_id,
                "text": message.subject,
                "parse_mode": message.options.get("parse_mode", "Markdown"),
            },
        )
        result = self._json(response, "post the Telegram message")

        if response.status_code != 200 or not result.get("ok", False):
            raise TransportError(
                "Unable to post the Telegram message: "
                f"{result.get('description', 'Unknown error')} "
                f"(code {result.get('error_code', response.status_code)}).",
                response,
            )

        sent = result.get("result")
        message_id = sent.get("message_id") if isinstance(sent, dict) else None
        return SentMessage(
            original_message=message,
            transport=self.describe(),
            message_id=str(message_id) if message_id is not None else None,
        )


class TelegramTransportFactory(BaseTransportFactory):
    supported_schemes = ("telegram",)

    def _create(self, dsn: Dsn) -> TelegramTransport:
        token = self._get_user(dsn)
        if dsn.password is not None:
            token = f"{token}:{dsn.password}"

        transport = TelegramTransport(
            token,
            dsn.get_option("channel"),
            self._client,
            self._dispatcher,
        )
        self._configure(transport, dsn)
        return transport
