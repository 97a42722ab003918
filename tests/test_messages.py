"""
Tests for message value objects.
"""

import dataclasses
import typing

import pytest

from herald.messages import ChatMessage, Message, SentMessage, SmsMessage


class TestMessages:
    def test_sms_requires_phone(self):
        with pytest.raises(ValueError):
            SmsMessage("", "hello")

    def test_sms_recipient(self, sms_message):
        assert sms_message.recipient_id == "+919876543210"
        assert sms_message.to_dict() == {
            "phone": "+919876543210",
            "subject": "Deploy finished",
            "transport": None,
        }

    def test_chat_options_are_independent(self):
        first = ChatMessage("a")
        first.options["topic"] = "ops"

        assert ChatMessage("b").options == {}
        assert first.recipient_id is None

    def test_annotations_resolve(self):
        assert typing.get_type_hints(SmsMessage)["transport"] == str | None
        assert typing.get_type_hints(ChatMessage)["options"] == dict[str, typing.Any]

    def test_messages_satisfy_protocol(self, sms_message, chat_message):
        assert isinstance(sms_message, Message)
        assert isinstance(chat_message, Message)


class TestSentMessage:
    def test_is_frozen(self, sms_message):
        sent = SentMessage(sms_message, "null", "id-1")

        with pytest.raises(dataclasses.FrozenInstanceError):
            sent.message_id = "other"

    def test_to_dict(self, chat_message):
        sent = SentMessage(chat_message, "telegram://api.telegram.org", "7")

        assert sent.to_dict() == {
            "transport": "telegram://api.telegram.org",
            "message_id": "7",
            "message": chat_message.to_dict(),
        }
