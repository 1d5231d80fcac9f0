"""Typer CLI for the page's Messenger profile.

The welcome postbacks and the Get Started payload only reach the webhook
once the page has a Get Started button and a persistent menu. This CLI
applies (or clears) them through the Messenger Profile API.

Usage:
    python -m src.cli.profile_cli show
    python -m src.cli.profile_cli apply
    python -m src.cli.profile_cli clear --yes
"""

import os

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

import asyncio
import json
from pathlib import Path
from typing import Any

import httpx
import questionary
import typer
from dotenv import load_dotenv

from src.config import ConfigMissingError, get_settings
from src.constants import (
    PAYLOAD_GET_STARTED,
    PAYLOAD_LOCATION,
    PAYLOAD_MENU,
    PAYLOAD_OPENING_HOURS,
)
from src.content import RESTAURANT_NAME, WEBSITE_URL
from src.services.facebook_service import (
    delete_messenger_profile_fields,
    set_messenger_profile,
)

_project_root = Path(__file__).resolve().parent.parent.parent

load_dotenv(_project_root / ".env")
load_dotenv(_project_root / ".env.local")

app = typer.Typer(help="Manage the Messenger profile of the configured page.")

PROFILE_FIELDS = ["get_started", "greeting", "persistent_menu"]

GREETING_TEXT = "Hi {{user_first_name}}! Welcome to " + RESTAURANT_NAME + "."


def build_profile() -> dict[str, Any]:
    """Messenger profile mirroring the buttons of the welcome card."""
    return {
        "get_started": {"payload": PAYLOAD_GET_STARTED},
        "greeting": [{"locale": "default", "text": GREETING_TEXT}],
        "persistent_menu": [
            {
                "locale": "default",
                "composer_input_disabled": False,
                "call_to_actions": [
                    {"type": "postback", "title": "Menu", "payload": PAYLOAD_MENU},
                    {
                        "type": "postback",
                        "title": "Our Location",
                        "payload": PAYLOAD_LOCATION,
                    },
                    {
                        "type": "postback",
                        "title": "Opening Hours",
                        "payload": PAYLOAD_OPENING_HOURS,
                    },
                    {"type": "web_url", "title": "Order Online", "url": WEBSITE_URL},
                ],
            }
        ],
    }


def _page_access_token() -> tuple[str, float]:
    try:
        settings = get_settings()
    except ConfigMissingError as e:
        typer.echo(f"✗ {e}", err=True)
        raise typer.Exit(1)
    return settings.messenger_page_access_token, settings.facebook_api_timeout_seconds


@app.command()
def show():
    """Print the profile that `apply` would send."""
    typer.echo(json.dumps(build_profile(), indent=2))


@app.command()
def apply():
    """Set the Get Started button, greeting and persistent menu."""
    token, timeout = _page_access_token()
    typer.echo("Applying Messenger profile...")
    try:
        result = asyncio.run(set_messenger_profile(token, build_profile(), timeout))
    except httpx.HTTPError as e:
        typer.echo(f"✗ Error applying Messenger profile: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"✓ Messenger profile applied: {result}")


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Remove the Get Started button, greeting and persistent menu."""
    if not yes:
        confirmed = questionary.confirm(
            f"Remove {', '.join(PROFILE_FIELDS)} from the page profile?",
            default=False,
        ).ask()
        if not confirmed:
            typer.echo("Aborted.")
            raise typer.Exit(0)

    token, timeout = _page_access_token()
    try:
        result = asyncio.run(delete_messenger_profile_fields(token, PROFILE_FIELDS, timeout))
    except httpx.HTTPError as e:
        typer.echo(f"✗ Error clearing Messenger profile: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"✓ Messenger profile cleared: {result}")


if __name__ == "__main__":
    app()
