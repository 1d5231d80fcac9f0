"""Webhook event dispatch.

Walks every entry and messaging event of a webhook envelope in order,
classifies each event and runs exactly one handler for it. Failures are
contained per event: a malformed event or a crashing handler is logged and
counted, and the next event is processed as usual.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import logfire
from pydantic import ValidationError

from src.config import Settings
from src.logging_config import mask_pii
from src.models.messenger import EventKind, MessagingEvent, WebhookEnvelope
from src.services.messaging_protocol import get_messaging_service
from src.services.reply_composer import ReplyComposer

logger = logging.getLogger(__name__)


@dataclass
class DispatchSummary:
    """Counts for one webhook delivery."""

    handled: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.handled + self.skipped + self.failed


class EventDispatcher:
    """Route messaging events to their handlers.

    Example:
        >>> dispatcher = EventDispatcher(ReplyComposer(MockMessagingService()))
        >>> summary = await dispatcher.dispatch(envelope)
    """

    def __init__(self, composer: ReplyComposer):
        self._composer = composer
        self._handlers: dict[EventKind, Callable[[MessagingEvent], Awaitable[None]]] = {
            EventKind.OPTIN: self._handle_optin,
            EventKind.MESSAGE: self._handle_message,
            EventKind.DELIVERY: self._handle_delivery,
            EventKind.POSTBACK: self._handle_postback,
            EventKind.READ: self._handle_read,
            EventKind.ACCOUNT_LINKING: self._handle_account_linking,
        }

    async def dispatch(self, envelope: WebhookEnvelope) -> DispatchSummary:
        """Process every event of a page subscription envelope.

        Never raises. Envelopes for other objects are ignored.
        """
        summary = DispatchSummary()

        if not envelope.is_page_subscription:
            logfire.info("Ignoring non-page webhook", object=envelope.object)
            return summary

        for entry in envelope.entries:
            for raw_event in entry.messaging_events:
                await self._dispatch_event(entry.page_id, raw_event, summary)

        logfire.info(
            "Webhook batch dispatched",
            entries=len(envelope.entries),
            handled=summary.handled,
            skipped=summary.skipped,
            failed=summary.failed,
        )
        return summary

    async def _dispatch_event(
        self,
        page_id: str | None,
        raw_event: Any,
        summary: DispatchSummary,
    ) -> None:
        try:
            event = MessagingEvent.model_validate(raw_event)
        except ValidationError as e:
            logfire.warning(
                "Skipping malformed messaging event",
                page_id=page_id,
                error_count=e.error_count(),
                errors=str(e)[:500],
            )
            summary.failed += 1
            return

        handler = self._handlers.get(event.kind)
        if handler is None:
            logfire.warning(
                "Webhook received unknown messaging event",
                page_id=page_id,
                sender_id=event.sender_id,
                fields=sorted(raw_event),
            )
            summary.skipped += 1
            return

        try:
            await handler(event)
        except Exception as e:
            logger.error(
                "Error handling %s event from %s: %s",
                event.kind.value,
                event.sender_id,
                e,
                exc_info=True,
            )
            summary.failed += 1
            return

        summary.handled += 1

    # =========================================================================
    # Handlers
    # =========================================================================

    async def _handle_optin(self, event: MessagingEvent) -> None:
        # 'ref' is the data-ref of the Send to Messenger plugin
        logfire.info(
            "Received authentication",
            sender_id=event.sender_id,
            recipient_id=event.recipient_id,
            pass_through_param=event.optin.ref,
            timestamp=event.timestamp,
        )
        await self._composer.confirm_authentication(event.sender_id)

    async def _handle_message(self, event: MessagingEvent) -> None:
        message = event.message

        logfire.info(
            "Received message",
            sender_id=event.sender_id,
            recipient_id=event.recipient_id,
            message_id=message.message_id,
            timestamp=event.timestamp,
        )

        if message.is_echo:
            logfire.info(
                "Received echo",
                message_id=message.message_id,
                app_id=message.app_id,
                metadata=message.metadata,
            )
            return

        if message.quick_reply is not None:
            payload = message.quick_reply.payload
            logfire.info(
                "Quick reply received",
                sender_id=event.sender_id,
                message_id=message.message_id,
                payload=payload,
            )
            action = self._composer.action_for_payload(payload)
        elif message.text:
            action = self._composer.action_for_text(message.text)
        elif message.attachments:
            # Attachments are acknowledged with the welcome card, never inspected
            action = self._composer.action_for_payload(None)
        else:
            logfire.info(
                "Message has no text, attachments or quick reply",
                sender_id=event.sender_id,
                message_id=message.message_id,
            )
            return

        await self._composer.reply(event.sender_id, action)

    async def _handle_delivery(self, event: MessagingEvent) -> None:
        delivery = event.delivery
        for message_id in delivery.message_ids or []:
            logfire.info("Received delivery confirmation", message_id=message_id)
        logfire.info(
            "All messages before watermark were delivered",
            watermark=delivery.watermark,
            seq=delivery.seq,
        )

    async def _handle_postback(self, event: MessagingEvent) -> None:
        payload = event.postback.payload
        logfire.info(
            "Received postback",
            sender_id=event.sender_id,
            recipient_id=event.recipient_id,
            payload=payload,
            timestamp=event.timestamp,
        )
        action = self._composer.action_for_payload(payload)
        await self._composer.reply(event.sender_id, action)

    async def _handle_read(self, event: MessagingEvent) -> None:
        logfire.info(
            "Received message read event",
            sender_id=event.sender_id,
            watermark=event.read.watermark,
            seq=event.read.seq,
        )

    async def _handle_account_linking(self, event: MessagingEvent) -> None:
        linking = event.account_linking
        logfire.info(
            "Received account link event",
            sender_id=event.sender_id,
            status=linking.status,
            authorization_code=mask_pii(linking.authorization_code),
        )


def get_event_dispatcher(settings: Settings) -> EventDispatcher:
    """Factory function wiring the dispatcher to the configured page.

    Args:
        settings: Application settings

    Returns:
        EventDispatcher sending through the Facebook messaging service
    """
    composer = ReplyComposer(
        sender=get_messaging_service(settings),
        follow_up_delay_seconds=settings.follow_up_delay_seconds,
    )
    return EventDispatcher(composer)
