"""
Transport and Transport Factory contracts for Herald.

Transport:
    supports(message) -> bool     pure predicate, never raises
    send(message) -> SentMessage  one attempt, no implicit retry
    describe() -> str             stable identity, never includes secrets

TransportFactory:
    supports(dsn) -> bool
    create(dsn) -> Transport

BaseTransport and BaseTransportFactory carry the behaviour shared by
every vendor bridge: endpoint overrides, lifecycle events, error
normalisation and credential extraction from DSNs.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

import httpx

from ..events import FailedMessageEvent, MessageEvent, SentMessageEvent
from ..exceptions import (
    IncompleteDsnError,
    TransportError,
    UnsupportedMessageTypeError,
    UnsupportedSchemeError,
)

if TYPE_CHECKING:
    from ..events import EventDispatcher
    from ..messages import SentMessage
    from .dsn import Dsn

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@runtime_checkable
class Transport(Protocol):
    """
    Uniform contract for vendor adapters and composite transports.

    Composites (failover, round-robin, named collections) implement the
    same protocol, so transports nest freely.
    """

    def supports(self, message: Any) -> bool:
        """Whether this transport can deliver the message."""
        ...

    def send(self, message: Any) -> SentMessage:
        """
        Deliver the message.

        Raises:
            UnsupportedMessageTypeError: If supports(message) is False
            TransportError: If the delivery attempt failed
        """
        ...

    def describe(self) -> str:
        """Human-readable identity without secrets."""
        ...


@runtime_checkable
class TransportFactory(Protocol):
    """Builds transports for the DSN schemes it claims."""

    def supports(self, dsn: Dsn) -> bool:
        ...

    def create(self, dsn: Dsn) -> Transport:
        """
        Build a transport.

        Raises:
            IncompleteDsnError: If required options/credentials are missing
            UnsupportedSchemeError: If the scheme is not claimed by this factory
        """
        ...


class BaseTransport(ABC):
    """
    Base class for vendor transports.

    Subclasses set HOST, SCHEME and MESSAGE_TYPE and implement
    _do_send() and describe(). send() is final in spirit: it checks the
    message type, dispatches lifecycle events and turns network and
    decoding failures into TransportError.
    """

    HOST: ClassVar[str] = "localhost"
    SCHEME: ClassVar[str] = ""
    MESSAGE_TYPE: ClassVar[type] = object

    def __init__(
        self,
        client: httpx.Client | None = None,
        dispatcher: EventDispatcher | None = None,
    ):
        self._client = client
        self._owns_client = client is None
        self._dispatcher = dispatcher
        self._host: str | None = None
        self._port: int | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=DEFAULT_TIMEOUT)
        return self._client

    def set_host(self, host: str | None) -> BaseTransport:
        self._host = host
        return self

    def set_port(self, port: int | None) -> BaseTransport:
        self._port = port
        return self

    @property
    def endpoint(self) -> str:
        """Host (and port) requests are sent to."""
        host = self._host or self.HOST
        if self._port:
            return f"{host}:{self._port}"
        return host

    def supports(self, message: Any) -> bool:
        return isinstance(message, self.MESSAGE_TYPE)

    @abstractmethod
    def describe(self) -> str:
        pass

    @abstractmethod
    def _do_send(self, message: Any) -> SentMessage:
        """Perform the vendor call. Only called for supported messages."""
        pass

    def send(self, message: Any) -> SentMessage:
        if not self.supports(message):
            raise UnsupportedMessageTypeError(
                self.describe(), self.MESSAGE_TYPE.__name__, message
            )

        self._dispatch(MessageEvent(message))

        try:
            sent_message = self._do_send(message)
        except httpx.HTTPError as e:
            error = TransportError(
                f"Could not reach the remote {self.SCHEME or 'transport'} server: {e}"
            )
            logger.error(f"{self.describe()} send failed: {error}")
            self._dispatch(FailedMessageEvent(message, error))
            raise error from e
        except TransportError as e:
            logger.error(f"{self.describe()} send failed: {e}")
            self._dispatch(FailedMessageEvent(message, e))
            raise
        except Exception as e:
            logger.error(f"{self.describe()} send error: {e}", exc_info=True)
            self._dispatch(FailedMessageEvent(message, e))
            raise

        logger.info(
            f"Sent message via {self.describe()}: id={sent_message.message_id}"
        )
        self._dispatch(SentMessageEvent(sent_message))
        return sent_message

    def _dispatch(self, event: object) -> None:
        if self._dispatcher is not None:
            self._dispatcher.dispatch(event)

    def _json(
        self, response: httpx.Response, action: str, expected: type = dict
    ) -> Any:
        """
        Decode a JSON body of the expected type.

        Raises:
            TransportError: If the body is not JSON or not an `expected` instance
        """
        try:
            content = response.json()
        except ValueError as e:
            raise TransportError(
                f"Unable to {action}: the response is not valid JSON.", response
            ) from e

        if not isinstance(content, expected):
            raise TransportError(
                f"Unable to {action}: expected a JSON {expected.__name__}, "
                f"got {type(content).__name__}.",
                response,
            )
        return content

    def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self.describe()}')"


class BaseTransportFactory(ABC):
    """
    Base class for vendor transport factories.

    Collaborators (event dispatcher, HTTP client) are injected once and
    passed to every transport the factory creates.
    """

    supported_schemes: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        dispatcher: EventDispatcher | None = None,
        client: httpx.Client | None = None,
    ):
        self._dispatcher = dispatcher
        self._client = client

    def supports(self, dsn: Dsn) -> bool:
        return dsn.scheme in self.supported_schemes

    def create(self, dsn: Dsn) -> Transport:
        if not self.supports(dsn):
            raise UnsupportedSchemeError(dsn, self.supported_schemes)
        return self._create(dsn)

    @abstractmethod
    def _create(self, dsn: Dsn) -> Transport:
        pass

    def _get_user(self, dsn: Dsn) -> str:
        if dsn.user is None:
            raise IncompleteDsnError(dsn, "user", "User is not set.")
        return dsn.user

    def _get_password(self, dsn: Dsn) -> str:
        if dsn.password is None:
            raise IncompleteDsnError(dsn, "password", "Password is not set.")
        return dsn.password

    def _configure(self, transport: BaseTransport, dsn: Dsn) -> BaseTransport:
        """Apply the DSN host/port unless the host is the "default" placeholder."""
        host = None if dsn.host == "default" else dsn.host
        return transport.set_host(host).set_port(dsn.port)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(schemes={list(self.supported_schemes)})"
