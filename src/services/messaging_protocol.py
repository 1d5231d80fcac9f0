"""Messaging abstraction protocols for decoupling from the Send API.

The dispatcher and reply composer only talk to a ``MessagingService``:
- ``send`` delivers one outbound message and reports the outcome
- ``send_later`` schedules a follow-up message after a delay

Keeping the delay on the sender (instead of timers scattered through the
handlers) lets tests observe follow-ups without waiting for them.
"""

import asyncio
from typing import Protocol

import httpx
import logfire

from src.background import track_background_task
from src.config import Settings
from src.constants import FACEBOOK_API_TIMEOUT_SECONDS, MAX_LOGGED_RESPONSE_BODY_CHARS
from src.models.outbound import OutboundMessage, SendError, SendResult


class MessagingService(Protocol):
    """Protocol for delivering outbound messages to a user."""

    async def send(self, recipient_id: str, message: OutboundMessage) -> SendResult:
        """Send a message now.

        Never raises; failures are reported through ``SendResult.error``.
        A 2xx whose body cannot be read still counts as delivered.
        """
        ...

    def send_later(
        self,
        recipient_id: str,
        message: OutboundMessage,
        delay_seconds: float,
    ) -> None:
        """Schedule a fire-and-forget send after ``delay_seconds``."""
        ...


class FacebookMessagingService:
    """Facebook Messenger implementation of MessagingService.

    Wraps ``facebook_service.call_send_api`` and turns its exceptions into
    ``SendResult`` values, so one failed send never interrupts dispatch.

    Example:
        >>> service = FacebookMessagingService(page_access_token="...")
        >>> result = await service.send("user123", TextMessage(text="Hello!"))
        >>> result.ok
        True
    """

    def __init__(
        self,
        page_access_token: str,
        timeout_seconds: float = FACEBOOK_API_TIMEOUT_SECONDS,
    ):
        if not page_access_token:
            raise ValueError("page_access_token is required")
        self._token = page_access_token
        self._timeout = timeout_seconds

    async def send(self, recipient_id: str, message: OutboundMessage) -> SendResult:
        from src.services.facebook_service import call_send_api

        try:
            response = await call_send_api(
                page_access_token=self._token,
                request_body=message.to_request(recipient_id),
                timeout_seconds=self._timeout,
            )
        except httpx.HTTPStatusError as e:
            return SendResult(
                recipient_id=recipient_id,
                error=SendError(
                    status_code=e.response.status_code,
                    body=e.response.text[:MAX_LOGGED_RESPONSE_BODY_CHARS],
                ),
            )
        except httpx.HTTPError as e:
            return SendResult(
                recipient_id=recipient_id,
                error=SendError(body=f"{type(e).__name__}: {e}"),
            )
        except ValueError as e:
            # 2xx with a body that is not JSON: delivered, but no message id
            logfire.warning(
                "Send API returned an unreadable body",
                recipient_id=recipient_id,
                message_kind=message.kind,
                error=str(e),
            )
            return SendResult(recipient_id=recipient_id)

        if not isinstance(response, dict):
            logfire.warning(
                "Send API returned a non-object body",
                recipient_id=recipient_id,
                message_kind=message.kind,
                body_type=type(response).__name__,
            )
            return SendResult(recipient_id=recipient_id)

        return SendResult(
            recipient_id=response.get("recipient_id", recipient_id),
            message_id=response.get("message_id"),
        )

    def send_later(
        self,
        recipient_id: str,
        message: OutboundMessage,
        delay_seconds: float,
    ) -> None:
        task = asyncio.create_task(
            self._send_after(recipient_id, message, delay_seconds),
            name=f"follow-up:{recipient_id}",
        )
        track_background_task(task)

    async def _send_after(
        self,
        recipient_id: str,
        message: OutboundMessage,
        delay_seconds: float,
    ) -> None:
        await asyncio.sleep(delay_seconds)
        try:
            result = await self.send(recipient_id, message)
        except Exception as e:
            logfire.error(
                "Delayed send crashed",
                recipient_id=recipient_id,
                message_kind=message.kind,
                error=str(e),
                error_type=type(e).__name__,
            )
            return

        if not result.ok:
            logfire.warning(
                "Delayed send failed",
                recipient_id=recipient_id,
                message_kind=message.kind,
                status_code=result.error.status_code,
            )


class MockMessagingService:
    """Mock implementation for testing.

    Records every send and every scheduled follow-up, in call order, in
    ``outbox`` as ``(recipient_id, message, delay_seconds)``; immediate sends
    carry a delay of None.

    Example:
        >>> service = MockMessagingService()
        >>> await service.send("user123", TextMessage(text="Test message"))
        >>> service.outbox
        [('user123', TextMessage(kind='text', text='Test message'), None)]
    """

    def __init__(self, should_fail_send: bool = False):
        self._should_fail_send = should_fail_send
        self.outbox: list[tuple[str, OutboundMessage, float | None]] = []

    @property
    def sent_messages(self) -> list[tuple[str, OutboundMessage]]:
        """Messages sent immediately."""
        return [(rid, msg) for rid, msg, delay in self.outbox if delay is None]

    @property
    def scheduled_messages(self) -> list[tuple[str, OutboundMessage, float]]:
        """Follow-ups handed to ``send_later``."""
        return [entry for entry in self.outbox if entry[2] is not None]

    async def send(self, recipient_id: str, message: OutboundMessage) -> SendResult:
        self.outbox.append((recipient_id, message, None))
        if self._should_fail_send:
            return SendResult(
                recipient_id=recipient_id,
                error=SendError(status_code=500, body="mock failure"),
            )
        return SendResult(
            recipient_id=recipient_id, message_id=f"mid.{len(self.outbox)}"
        )

    def send_later(
        self,
        recipient_id: str,
        message: OutboundMessage,
        delay_seconds: float,
    ) -> None:
        self.outbox.append((recipient_id, message, delay_seconds))


def get_messaging_service(settings: Settings) -> FacebookMessagingService:
    """Factory function to get the MessagingService for the configured page.

    Args:
        settings: Application settings holding the page access token

    Returns:
        MessagingService implementation (currently Facebook)
    """
    return FacebookMessagingService(
        page_access_token=settings.messenger_page_access_token,
        timeout_seconds=settings.facebook_api_timeout_seconds,
    )
