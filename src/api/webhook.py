"""Facebook webhook endpoints.

GET verifies the subscription handshake. POST receives batched events:
the raw body is checked against the X-Hub-Signature header, parsed into a
``WebhookEnvelope`` and handed to the ``EventDispatcher`` as a background
task, so Facebook gets its 200 long before any reply is sent.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Request, Response
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from src.config import get_settings
from src.constants import SIGNATURE_HEADER
from src.models.messenger import WebhookEnvelope
from src.services.event_dispatcher import EventDispatcher, get_event_dispatcher
from src.services.signature import (
    SignatureHeaderMissingError,
    SignatureMismatchError,
    verify_signature,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def verify_webhook(request: Request):
    """Facebook webhook verification endpoint."""
    settings = get_settings()

    mode = request.query_params.get("hub.mode")
    token = request.query_params.get("hub.verify_token")
    challenge = request.query_params.get("hub.challenge")

    if mode == "subscribe" and token == settings.messenger_validation_token:
        logger.info("Webhook verified successfully")
        return PlainTextResponse(challenge or "")

    logger.error("Failed validation. Make sure the validation tokens match.")
    return Response(status_code=403)


@router.post("")
async def handle_webhook(request: Request, background_tasks: BackgroundTasks):
    """Handle incoming Facebook Messenger webhook events."""
    settings = get_settings()
    raw_body = await request.body()

    try:
        verify_signature(
            raw_body,
            request.headers.get(SIGNATURE_HEADER),
            settings.messenger_app_secret,
        )
    except SignatureHeaderMissingError:
        if settings.signature_missing_policy == "reject":
            logger.warning("Rejected webhook without %s header", SIGNATURE_HEADER)
            return Response(status_code=403)
        logger.error(
            "Couldn't validate the signature: no %s header, processing anyway",
            SIGNATURE_HEADER,
        )
    except SignatureMismatchError as e:
        logger.warning("Rejected webhook: %s", e)
        return Response(status_code=403)

    try:
        envelope = WebhookEnvelope.model_validate_json(raw_body)
    except ValidationError as e:
        logger.warning("Ignoring unparseable webhook body: %d errors", e.error_count())
        return {"status": "ignored"}

    if not envelope.is_page_subscription:
        logger.info("Ignoring webhook for object %r", envelope.object)
        return {"status": "ignored"}

    background_tasks.add_task(dispatch_envelope, envelope)

    # Facebook needs the 200 within 20 seconds or it retries the delivery
    return {"status": "ok"}


async def dispatch_envelope(
    envelope: WebhookEnvelope,
    *,
    dispatcher: EventDispatcher | None = None,
) -> None:
    """Dispatch a verified envelope after the response has been sent.

    Args:
        envelope: Parsed page subscription envelope
        dispatcher: Optional injected dispatcher (for testing)
    """
    try:
        _dispatcher = dispatcher or get_event_dispatcher(get_settings())
        await _dispatcher.dispatch(envelope)
    except Exception as e:
        logger.error("Error dispatching webhook: %s", e, exc_info=True)
