"""Centralized logging configuration with Pydantic Logfire integration."""

import logging
from typing import Any

import logfire
from fastapi import FastAPI

from src.config import Settings


def setup_logfire(app: FastAPI, settings: Settings) -> None:
    """
    Initialize and configure Pydantic Logfire for observability.

    Sets up:
    - FastAPI instrumentation (request/response tracing)
    - Pydantic instrumentation (webhook model validation)
    - Environment-aware stdlib logging format
    """
    logfire_config: dict[str, Any] = {
        "environment": settings.env,
        "service_name": "famous-greek-messenger-bot",
    }

    # Without a token Logfire still emits to the console only
    if settings.logfire_token:
        logfire_config["token"] = settings.logfire_token
    else:
        logfire_config["send_to_logfire"] = False

    logfire.configure(**logfire_config)

    logfire.instrument_fastapi(app)
    logfire.instrument_pydantic()

    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.env == "local":
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        # Logfire handles structured formatting in deployed environments
        logging.basicConfig(level=level, format="%(message)s")


def mask_pii(value: str | None, mask_char: str = "*") -> str:
    """
    Mask potentially sensitive data in logs.

    Args:
        value: Value to mask
        mask_char: Character to use for masking

    Returns:
        Masked string
    """
    if not value:
        return ""

    if len(value) <= 4:
        return mask_char * len(value)

    return f"{value[:2]}{mask_char * (len(value) - 4)}{value[-2:]}"


SENSITIVE_KEYS = frozenset(
    {
        "token",
        "access_token",
        "api_key",
        "secret",
        "app_secret",
        "authorization",
        "authorization_code",
        "account_linking_token",
    }
)


def redact_tokens(data: dict[str, Any]) -> dict[str, Any]:
    """
    Redact tokens, secrets and authorization codes from log data.

    Nested dictionaries are redacted recursively.

    Args:
        data: Dictionary that may contain sensitive values

    Returns:
        New dictionary with sensitive values masked
    """
    redacted = data.copy()

    for key, value in redacted.items():
        if isinstance(value, dict):
            redacted[key] = redact_tokens(value)
        elif key.lower() in SENSITIVE_KEYS and isinstance(value, str):
            redacted[key] = mask_pii(value)

    return redacted
