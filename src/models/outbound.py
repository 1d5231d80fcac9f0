"""Outgoing Send API models.

Every reply is one of four shapes: plain text, text with quick replies,
a generic template carousel, or a sender action such as the typing
indicator. Models are frozen: a message is built once and never changed.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class OutboundModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def _dump(self, **kwargs: Any) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True, **kwargs)


# =============================================================================
# Buttons
# =============================================================================


class PostbackButton(OutboundModel):
    type: Literal["postback"] = "postback"
    title: str = Field(..., max_length=20)
    payload: str = Field(..., max_length=1000)


class WebUrlButton(OutboundModel):
    type: Literal["web_url"] = "web_url"
    title: str = Field(..., max_length=20)
    url: str


class PhoneNumberButton(OutboundModel):
    type: Literal["phone_number"] = "phone_number"
    title: str = Field(..., max_length=20)
    payload: str = Field(..., description="Phone number in +<country><number> form")


Button = Annotated[
    Union[PostbackButton, WebUrlButton, PhoneNumberButton],
    Field(discriminator="type"),
]


class DefaultAction(OutboundModel):
    """Action taken when the element itself (not a button) is tapped."""

    type: Literal["web_url"] = "web_url"
    url: str
    messenger_extensions: bool | None = None
    webview_height_ratio: Literal["compact", "tall", "full"] | None = None
    fallback_url: str | None = None


class TemplateElement(OutboundModel):
    """One card of a generic template carousel."""

    title: str = Field(..., max_length=80)
    subtitle: str | None = None
    item_url: str | None = None
    image_url: str | None = None
    default_action: DefaultAction | None = None
    buttons: Annotated[tuple[Button, ...], Field(max_length=3)] | None = None


class QuickReply(OutboundModel):
    content_type: Literal["text"] = "text"
    title: str = Field(..., max_length=20)
    payload: str = Field(..., max_length=1000)


# =============================================================================
# Messages
# =============================================================================


class TextMessage(OutboundModel):
    kind: Literal["text"] = "text"
    text: str = Field(..., min_length=1, max_length=2000)

    def to_request(self, recipient_id: str) -> dict[str, Any]:
        return {"recipient": {"id": recipient_id}, "message": {"text": self.text}}


class QuickReplyMessage(OutboundModel):
    kind: Literal["quick_replies"] = "quick_replies"
    text: str = Field(..., min_length=1, max_length=2000)
    quick_replies: tuple[QuickReply, ...] = Field(..., min_length=1, max_length=13)

    def to_request(self, recipient_id: str) -> dict[str, Any]:
        return {
            "recipient": {"id": recipient_id},
            "message": {
                "text": self.text,
                "quick_replies": [reply._dump() for reply in self.quick_replies],
            },
        }


class GenericTemplateMessage(OutboundModel):
    kind: Literal["generic_template"] = "generic_template"
    elements: tuple[TemplateElement, ...] = Field(..., min_length=1, max_length=10)

    def to_request(self, recipient_id: str) -> dict[str, Any]:
        return {
            "recipient": {"id": recipient_id},
            "message": {
                "attachment": {
                    "type": "template",
                    "payload": {
                        "template_type": "generic",
                        "elements": [element._dump() for element in self.elements],
                    },
                }
            },
        }


class SenderAction(OutboundModel):
    kind: Literal["sender_action"] = "sender_action"
    action: Literal["typing_on", "typing_off", "mark_seen"]

    def to_request(self, recipient_id: str) -> dict[str, Any]:
        return {"recipient": {"id": recipient_id}, "sender_action": self.action}


OutboundMessage = Annotated[
    Union[TextMessage, QuickReplyMessage, GenericTemplateMessage, SenderAction],
    Field(discriminator="kind"),
]

TYPING_ON = SenderAction(action="typing_on")


# =============================================================================
# Send results
# =============================================================================


class SendError(BaseModel):
    """Failure reported by the Send API or by the transport."""

    status_code: int | None = None
    body: str = ""


class SendResult(BaseModel):
    """Outcome of one Send API call."""

    recipient_id: str
    message_id: str | None = None
    error: SendError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
