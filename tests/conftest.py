"""
Pytest configuration and fixtures for Herald tests.
"""

import sys
from pathlib import Path

import httpx
import pytest

# Add the repository root to path for imports
# This allows `from herald.transports import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from herald.exceptions import TransportError  # noqa: E402
from herald.messages import ChatMessage, SentMessage, SmsMessage  # noqa: E402


class StubTransport:
    """Transport double that records calls and succeeds or fails on demand."""

    def __init__(self, name: str, fail: bool = False, message_type: type = object):
        self.name = name
        self.fail = fail
        self.message_type = message_type
        self.calls = []

    def supports(self, message) -> bool:
        return isinstance(message, self.message_type)

    def send(self, message) -> SentMessage:
        self.calls.append(message)
        if self.fail:
            raise TransportError(f"{self.name} is down")
        return SentMessage(
            original_message=message,
            transport=self.describe(),
            message_id=f"{self.name}-{len(self.calls)}",
        )

    def describe(self) -> str:
        return f"stub://{self.name}"


class RecordingHandler:
    """httpx.MockTransport handler returning a canned response."""

    def __init__(self, status_code: int = 200, json=None, content: bytes | None = None):
        self.status_code = status_code
        self.json = json
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def stub_transport():
    """Factory for StubTransport instances."""
    return StubTransport


@pytest.fixture
def mock_http():
    """
    Build an httpx.Client whose requests are answered by a RecordingHandler.

    Usage:
        client, handler = mock_http(201, {"sid": "SM123"})
    """
    clients = []

    def _make(status_code: int = 200, json=None, content: bytes | None = None):
        handler = RecordingHandler(status_code, json, content)
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client, handler

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def sms_message():
    """Sample SMS message for testing."""
    return SmsMessage(phone="+919876543210", subject="Deploy finished")


@pytest.fixture
def chat_message():
    """Sample chat message for testing."""
    return ChatMessage(subject="Backup completed", options={"topic": "ops"})
