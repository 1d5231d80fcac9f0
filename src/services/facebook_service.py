"""Facebook Graph API calls: Send API and Messenger Profile API."""

import time
from typing import Any

import httpx
import logfire

from src.constants import (
    FACEBOOK_API_TIMEOUT_SECONDS,
    FACEBOOK_GRAPH_API_BASE_URL,
    FACEBOOK_GRAPH_API_VERSION,
    MAX_LOGGED_RESPONSE_BODY_CHARS,
)
from src.logging_config import redact_tokens

SEND_API_URL = (
    f"{FACEBOOK_GRAPH_API_BASE_URL}/{FACEBOOK_GRAPH_API_VERSION}/me/messages"
)
MESSENGER_PROFILE_URL = (
    f"{FACEBOOK_GRAPH_API_BASE_URL}/{FACEBOOK_GRAPH_API_VERSION}/me/messenger_profile"
)


async def call_send_api(
    page_access_token: str,
    request_body: dict[str, Any],
    timeout_seconds: float = FACEBOOK_API_TIMEOUT_SECONDS,
) -> Any:
    """
    POST one request body to the Send API.

    Args:
        page_access_token: Facebook Page access token
        request_body: Complete Send API body (recipient plus message or sender_action)
        timeout_seconds: HTTP timeout for the call

    Returns:
        Decoded response, normally {"recipient_id": ..., "message_id": ...}

    Raises:
        httpx.HTTPStatusError: On a non-2xx response
        httpx.RequestError: On transport failures (timeouts, connection errors)
        ValueError: If a 2xx response body is not JSON
    """
    start_time = time.time()
    recipient_id = request_body.get("recipient", {}).get("id")

    logfire.info(
        "Calling Send API",
        recipient_id=recipient_id,
        sender_action=request_body.get("sender_action"),
        api_version=FACEBOOK_GRAPH_API_VERSION,
    )

    params = {"access_token": page_access_token}

    try:
        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            response = await client.post(SEND_API_URL, params=params, json=request_body)
            elapsed = time.time() - start_time

            if response.is_success:
                response_data = response.json() if response.content else {}
                logfire.info(
                    "Send API call succeeded",
                    recipient_id=recipient_id,
                    status_code=response.status_code,
                    message_id=(
                        response_data.get("message_id")
                        if isinstance(response_data, dict)
                        else None
                    ),
                    response_time_ms=elapsed * 1000,
                )
                return response_data

            logfire.error(
                "Send API call failed",
                recipient_id=recipient_id,
                status_code=response.status_code,
                response_body=response.text[:MAX_LOGGED_RESPONSE_BODY_CHARS],
                response_time_ms=elapsed * 1000,
                request_params=redact_tokens(params),
            )
            response.raise_for_status()
            return {}
    except httpx.RequestError as e:
        elapsed = time.time() - start_time
        logfire.error(
            "Send API request error",
            recipient_id=recipient_id,
            error=str(e),
            error_type=type(e).__name__,
            response_time_ms=elapsed * 1000,
            request_params=redact_tokens(params),
        )
        raise


async def set_messenger_profile(
    page_access_token: str,
    profile: dict[str, Any],
    timeout_seconds: float = FACEBOOK_API_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    """
    Apply Messenger profile properties (get_started, greeting, persistent_menu).

    Raises:
        httpx.HTTPStatusError: On a non-2xx response
    """
    logfire.info("Setting Messenger profile", fields=sorted(profile))

    async with httpx.AsyncClient(timeout=timeout_seconds) as client:
        response = await client.post(
            MESSENGER_PROFILE_URL,
            params={"access_token": page_access_token},
            json=profile,
        )
        if not response.is_success:
            logfire.error(
                "Messenger profile update failed",
                status_code=response.status_code,
                response_body=response.text[:MAX_LOGGED_RESPONSE_BODY_CHARS],
                request_params=redact_tokens({"access_token": page_access_token}),
            )
        response.raise_for_status()
        return response.json()


async def delete_messenger_profile_fields(
    page_access_token: str,
    fields: list[str],
    timeout_seconds: float = FACEBOOK_API_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    """
    Remove Messenger profile properties.

    Raises:
        httpx.HTTPStatusError: On a non-2xx response
    """
    logfire.info("Deleting Messenger profile fields", fields=fields)

    async with httpx.AsyncClient(timeout=timeout_seconds) as client:
        response = await client.request(
            "DELETE",
            MESSENGER_PROFILE_URL,
            params={"access_token": page_access_token},
            json={"fields": fields},
        )
        if not response.is_success:
            logfire.error(
                "Messenger profile delete failed",
                status_code=response.status_code,
                response_body=response.text[:MAX_LOGGED_RESPONSE_BODY_CHARS],
                request_params=redact_tokens({"access_token": page_access_token}),
            )
        response.raise_for_status()
        return response.json()
