"""
MessageBird Transport for Herald.

DSN:
    messagebird://TOKEN@default?from=FROM
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import IncompleteDsnError, TransportError
from ..messages import SentMessage, SmsMessage
from ..transports.protocol import BaseTransport, BaseTransportFactory

if TYPE_CHECKING:
    import httpx

    from ..events import EventDispatcher
    from ..transports.dsn import Dsn

logger = logging.getLogger(__name__)


class MessageBirdTransport(BaseTransport):
    HOST = "rest.messagebird.com"
    SCHEME = "messagebird"
    MESSAGE_TYPE = SmsMessage

    def __init__(
        self,
        auth_token: str,
        from_number: str,
        client: httpx.Client | None = None,
        dispatcher: EventDispatcher | None = None,
    ):
        super().__init__(client, dispatcher)
        self._auth_token = auth_token
        self._from_number = from_number

    def describe(self) -> str:
        return f"messagebird://{self.endpoint}?from={self._from_number}"

    def _do_send(self, message: SmsMessage) -> SentMessage:
        response = self.client.post(
            f"https://{self.endpoint}/messages",
            headers={"Authorization": f"AccessKey {self._auth_token}"},
            data={
                "originator": self._from_number,
                "recipients": message.phone,
                "body": message.subject,
            },
        )
        result = self._json(response, "send the SMS")

        if response.status_code != 201:
            raise TransportError(
                f"Unable to send the SMS: {self._error_description(result)}", response
            )

        message_id = result.get("id")
        return SentMessage(
            original_message=message,
            transport=self.describe(),
            message_id=str(message_id) if message_id is not None else None,
        )

    @staticmethod
    def _error_description(result: dict) -> str:
        errors = result.get("errors")
        if not isinstance(errors, list) or not errors:
            return "Unknown error"
        first = errors[0]
        if isinstance(first, dict):
            return str(first.get("description", "Unknown error"))
        return str(first)


class MessageBirdTransportFactory(BaseTransportFactory):
    supported_schemes = ("messagebird",)

    def _create(self, dsn: Dsn) -> MessageBirdTransport:
        # Accept both "TOKEN@host" and ":TOKEN@host"
        auth_token = dsn.user or dsn.password
        if not auth_token:
            raise IncompleteDsnError(dsn, "user", "Auth token is not set.")

        transport = MessageBirdTransport(
            auth_token=auth_token,
            from_number=dsn.get_required_option("from"),
            client=self._client,
            dispatcher=self._dispatcher,
        )
        self._configure(transport, dsn)
        return transport
