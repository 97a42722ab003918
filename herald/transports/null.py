"""
Null Transport for Herald.

Accepts every message and performs no I/O. Used for disabled channels,
tests, and as the terminal entry of the default factory list.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..messages import SentMessage
from .protocol import BaseTransport, BaseTransportFactory

if TYPE_CHECKING:
    import httpx

    from ..events import EventDispatcher
    from .dsn import Dsn


class NullTransport(BaseTransport):
    """Transport that drops every message and reports success."""

    SCHEME = "null"

    def describe(self) -> str:
        return "null"

    def _do_send(self, message: Any) -> SentMessage:
        return SentMessage(original_message=message, transport=self.describe())


class NullTransportFactory(BaseTransportFactory):
    """
    Factory for NullTransport.

    Claims the "null" scheme. With catch_all=True it claims every scheme,
    so a registry ending with it never raises UnsupportedSchemeError.
    """

    supported_schemes = ("null",)

    def __init__(
        self,
        dispatcher: EventDispatcher | None = None,
        client: httpx.Client | None = None,
        catch_all: bool = False,
    ):
        super().__init__(dispatcher, client)
        self._catch_all = catch_all

    @property
    def catch_all(self) -> bool:
        return self._catch_all

    def supports(self, dsn: Dsn) -> bool:
        return self._catch_all or super().supports(dsn)

    def _create(self, dsn: Dsn) -> NullTransport:
        return NullTransport(self._client, self._dispatcher)
