"""Account linking landing page.

The "Log In" call-to-action of the Messenger account linking flow points
here. The page lets the user confirm, then sends them back to Messenger's
redirect URI with an authorization code appended.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Query, Request
from fastapi.templating import Jinja2Templates

from src.constants import PLACEHOLDER_AUTHORIZATION_CODE
from src.content import RESTAURANT_NAME
from src.logging_config import mask_pii

logger = logging.getLogger(__name__)
router = APIRouter()

templates = Jinja2Templates(directory=Path(__file__).resolve().parent.parent / "templates")


def build_success_redirect(redirect_uri: str, authorization_code: str) -> str:
    """Messenger's redirect URI already carries a query string, so append with '&'."""
    return f"{redirect_uri}&authorization_code={authorization_code}"


@router.get("/authorize")
async def authorize(
    request: Request,
    account_linking_token: str = Query(...),
    redirect_uri: str = Query(...),
):
    """Render the account linking consent page."""
    # TODO: issue a real per-user authorization code once a user store exists
    authorization_code = PLACEHOLDER_AUTHORIZATION_CODE

    logger.info(
        "Rendering account linking page for token %s",
        mask_pii(account_linking_token),
    )

    return templates.TemplateResponse(
        request,
        "authorize.html",
        {
            "account_linking_token": account_linking_token,
            "redirect_uri": redirect_uri,
            "redirect_uri_success": build_success_redirect(
                redirect_uri, authorization_code
            ),
            "restaurant_name": RESTAURANT_NAME,
        },
    )
