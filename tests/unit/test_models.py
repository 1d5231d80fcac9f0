"""Tests for webhook and Send API models."""

import pytest
from pydantic import TypeAdapter, ValidationError

from src.models.messenger import EventKind, MessagingEvent, WebhookEnvelope
from src.models.outbound import (
    TYPING_ON,
    GenericTemplateMessage,
    OutboundMessage,
    PhoneNumberButton,
    PostbackButton,
    QuickReply,
    QuickReplyMessage,
    SendError,
    SendResult,
    TemplateElement,
    TextMessage,
    WebUrlButton,
)


def _event(**variant):
    return {"sender": {"id": "u1"}, "recipient": {"id": "p1"}, "timestamp": 1, **variant}


class TestMessagingEvent:
    """Test MessagingEvent parsing and classification."""

    @pytest.mark.parametrize(
        "variant, kind",
        [
            ({"optin": {"ref": "abc"}}, EventKind.OPTIN),
            ({"message": {"mid": "m1", "text": "hi"}}, EventKind.MESSAGE),
            ({"delivery": {"mids": ["m1"], "watermark": 10}}, EventKind.DELIVERY),
            ({"postback": {"payload": "X"}}, EventKind.POSTBACK),
            ({"read": {"watermark": 10, "seq": 2}}, EventKind.READ),
            ({"account_linking": {"status": "linked"}}, EventKind.ACCOUNT_LINKING),
            ({}, EventKind.UNKNOWN),
        ],
    )
    def test_kind_from_variant(self, variant, kind):
        assert MessagingEvent.model_validate(_event(**variant)).kind == kind

    def test_kind_priority_when_several_variants_present(self):
        event = MessagingEvent.model_validate(
            _event(message={"text": "hi"}, postback={"payload": "X"})
        )
        assert event.kind == EventKind.MESSAGE

        event = MessagingEvent.model_validate(
            _event(optin={"ref": "r"}, message={"text": "hi"})
        )
        assert event.kind == EventKind.OPTIN

    def test_wire_aliases(self):
        event = MessagingEvent.model_validate(
            _event(
                message={
                    "mid": "mid.1",
                    "is_echo": True,
                    "app_id": 1517776481860111,
                    "metadata": "meta",
                }
            )
        )
        assert event.message.message_id == "mid.1"
        assert event.message.is_echo is True
        assert event.sender_id == "u1"
        assert event.recipient_id == "p1"

    def test_quick_reply_payload(self):
        event = MessagingEvent.model_validate(
            _event(message={"text": "Party Special", "quick_reply": {"payload": "P"}})
        )
        assert event.message.quick_reply.payload == "P"

    def test_delivery_without_mids(self):
        event = MessagingEvent.model_validate(_event(delivery={"watermark": 5}))
        assert event.delivery.message_ids is None
        assert event.delivery.watermark == 5

    def test_unknown_fields_ignored(self):
        event = MessagingEvent.model_validate(
            _event(message={"text": "hi", "nlp": {"entities": {}}}, extra_field=1)
        )
        assert event.message.text == "hi"

    def test_missing_sender_is_invalid(self):
        with pytest.raises(ValidationError):
            MessagingEvent.model_validate({"recipient": {"id": "p1"}, "message": {}})


class TestWebhookEnvelope:
    """Test WebhookEnvelope parsing."""

    def test_parses_entries_and_keeps_events_raw(self):
        envelope = WebhookEnvelope.model_validate(
            {
                "object": "page",
                "entry": [
                    {"id": "p1", "time": 123, "messaging": [_event(read={"watermark": 1})]}
                ],
            }
        )
        assert envelope.is_page_subscription
        assert envelope.entries[0].page_id == "p1"
        assert envelope.entries[0].timestamp == 123
        assert isinstance(envelope.entries[0].messaging_events[0], dict)

    def test_non_page_object(self):
        envelope = WebhookEnvelope.model_validate({"object": "user", "entry": []})
        assert not envelope.is_page_subscription

    def test_entry_without_messaging(self):
        envelope = WebhookEnvelope.model_validate({"object": "page", "entry": [{"id": "p"}]})
        assert envelope.entries[0].messaging_events == []

    def test_missing_object_is_invalid(self):
        with pytest.raises(ValidationError):
            WebhookEnvelope.model_validate_json(b'{"entry": []}')

    def test_non_json_is_invalid(self):
        with pytest.raises(ValidationError):
            WebhookEnvelope.model_validate_json(b"not json")


class TestOutboundRequests:
    """Test Send API request bodies."""

    def test_text_message(self):
        assert TextMessage(text="Hello").to_request("u1") == {
            "recipient": {"id": "u1"},
            "message": {"text": "Hello"},
        }

    def test_typing_indicator(self):
        assert TYPING_ON.to_request("u1") == {
            "recipient": {"id": "u1"},
            "sender_action": "typing_on",
        }

    def test_quick_replies(self):
        message = QuickReplyMessage(
            text="Pick one", quick_replies=(QuickReply(title="A", payload="PA"),)
        )
        assert message.to_request("u1")["message"] == {
            "text": "Pick one",
            "quick_replies": [{"content_type": "text", "title": "A", "payload": "PA"}],
        }

    def test_generic_template_omits_unset_fields(self):
        message = GenericTemplateMessage(
            elements=(
                TemplateElement(
                    title="Card",
                    buttons=(
                        PostbackButton(title="Go", payload="GO"),
                        WebUrlButton(title="Web", url="https://example.com"),
                        PhoneNumberButton(title="Call", payload="+15550100"),
                    ),
                ),
            )
        )
        attachment = message.to_request("u1")["message"]["attachment"]
        assert attachment["type"] == "template"
        assert attachment["payload"]["template_type"] == "generic"
        element = attachment["payload"]["elements"][0]
        assert element == {
            "title": "Card",
            "buttons": [
                {"type": "postback", "title": "Go", "payload": "GO"},
                {"type": "web_url", "title": "Web", "url": "https://example.com"},
                {"type": "phone_number", "title": "Call", "payload": "+15550100"},
            ],
        }

    def test_element_allows_at_most_three_buttons(self):
        button = PostbackButton(title="B", payload="P")
        with pytest.raises(ValidationError):
            TemplateElement(title="Card", buttons=(button,) * 4)

    def test_template_needs_an_element(self):
        with pytest.raises(ValidationError):
            GenericTemplateMessage(elements=())

    def test_empty_text_rejected(self):
        with pytest.raises(ValidationError):
            TextMessage(text="")

    def test_messages_are_frozen(self):
        message = TextMessage(text="Hello")
        with pytest.raises(ValidationError):
            message.text = "Changed"

    def test_outbound_union_discriminates_on_kind(self):
        adapter = TypeAdapter(OutboundMessage)
        parsed = adapter.validate_python({"kind": "sender_action", "action": "mark_seen"})
        assert parsed.action == "mark_seen"


class TestSendResult:
    def test_ok_without_error(self):
        assert SendResult(recipient_id="u1", message_id="m1").ok

    def test_not_ok_with_error(self):
        result = SendResult(recipient_id="u1", error=SendError(status_code=400, body="bad"))
        assert not result.ok
