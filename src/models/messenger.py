"""Incoming Facebook Messenger webhook models.

Field names follow Python conventions; the wire names used by the
Messenger Platform are mapped through aliases. Unknown wire fields are
ignored so new platform additions do not break parsing.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MessengerModel(BaseModel):
    """Base for webhook models: alias-aware, tolerant of extra fields."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class EventKind(str, Enum):
    """Kind of a messaging event, decided by which variant field is present."""

    OPTIN = "optin"
    MESSAGE = "message"
    DELIVERY = "delivery"
    POSTBACK = "postback"
    READ = "read"
    ACCOUNT_LINKING = "account_linking"
    UNKNOWN = "unknown"


class Participant(MessengerModel):
    """Sender or recipient reference (PSID or page ID)."""

    id: str


class Optin(MessengerModel):
    """Send-to-Messenger plugin authentication."""

    ref: str | None = None


class QuickReplyPayload(MessengerModel):
    payload: str | None = None


class Attachment(MessengerModel):
    type: str
    payload: dict[str, Any] | None = None


class Message(MessengerModel):
    """A message sent to the page (or echoed back from it)."""

    is_echo: bool = False
    message_id: str | None = Field(default=None, alias="mid")
    app_id: int | str | None = None
    metadata: str | None = None
    text: str | None = None
    attachments: list[Attachment] | None = None
    quick_reply: QuickReplyPayload | None = None


class Delivery(MessengerModel):
    message_ids: list[str] | None = Field(default=None, alias="mids")
    watermark: int
    seq: int | None = None


class Postback(MessengerModel):
    payload: str | None = None
    title: str | None = None


class Read(MessengerModel):
    watermark: int
    seq: int | None = None


class AccountLinking(MessengerModel):
    status: str
    authorization_code: str | None = None


class MessagingEvent(MessengerModel):
    """One entry of ``entry[].messaging``.

    By platform contract exactly one of the variant fields is populated.
    """

    sender: Participant
    recipient: Participant
    timestamp: int | None = None

    optin: Optin | None = None
    message: Message | None = None
    delivery: Delivery | None = None
    postback: Postback | None = None
    read: Read | None = None
    account_linking: AccountLinking | None = None

    @property
    def sender_id(self) -> str:
        return self.sender.id

    @property
    def recipient_id(self) -> str:
        return self.recipient.id

    @property
    def kind(self) -> EventKind:
        """Classify the event, checking variants in fixed priority order."""
        if self.optin is not None:
            return EventKind.OPTIN
        if self.message is not None:
            return EventKind.MESSAGE
        if self.delivery is not None:
            return EventKind.DELIVERY
        if self.postback is not None:
            return EventKind.POSTBACK
        if self.read is not None:
            return EventKind.READ
        if self.account_linking is not None:
            return EventKind.ACCOUNT_LINKING
        return EventKind.UNKNOWN


class PageEntry(MessengerModel):
    """One page's batch of events.

    Events stay as raw mappings here and are validated one at a time by the
    dispatcher, so a single malformed event cannot reject the whole batch.
    """

    page_id: str | None = Field(default=None, alias="id")
    timestamp: int | None = Field(default=None, alias="time")
    messaging_events: list[Any] = Field(
        default_factory=list, alias="messaging"
    )


class WebhookEnvelope(MessengerModel):
    """Top-level webhook payload."""

    object: str
    entries: list[PageEntry] = Field(default_factory=list, alias="entry")

    @property
    def is_page_subscription(self) -> bool:
        return self.object == "page"
