"""Keyword and payload routing to canned replies.

Two fixed tables map user input to a ``ReplyAction``:
- ``KEYWORD_ACTIONS`` for free text, matched after lowercasing
- ``PAYLOAD_ACTIONS`` for postback and quick-reply payload tokens, matched verbatim

Each action expands to a ``ReplyPlan`` (typing indicator, immediate
messages, optional delayed follow-up) that ``ReplyComposer`` hands to the
messaging service.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable

import logfire

from src import content
from src.constants import (
    FOLLOW_UP_DELAY_SECONDS,
    PAYLOAD_ALL_SPECIAL,
    PAYLOAD_ALL_SPECIAL_BACK,
    PAYLOAD_DAILY_SPECIAL,
    PAYLOAD_DAILY_SPECIAL_BACK,
    PAYLOAD_GET_STARTED,
    PAYLOAD_LOCATION,
    PAYLOAD_MAIN_MENU_BACK,
    PAYLOAD_MENU,
    PAYLOAD_OPENING_HOURS,
    PAYLOAD_PARTY_SPECIAL,
    PAYLOAD_PARTY_SPECIAL_BACK,
    PAYLOAD_REVIEWS,
    PAYLOAD_START_OVER,
    PAYLOAD_TESTIMONIALS,
)
from src.models.outbound import TYPING_ON, OutboundMessage, SendResult
from src.services.messaging_protocol import MessagingService


class ReplyAction(str, Enum):
    """Every canned reply the bot can produce."""

    NONE = "none"
    WELCOME = "welcome"
    WELCOME_WITH_GREETING = "welcome_with_greeting"
    MAIN_MENU = "main_menu"
    LOCATION = "location"
    OPENING_HOURS = "opening_hours"
    OPENING_HOURS_WITH_PROMPT = "opening_hours_with_prompt"
    ALL_SPECIALS = "all_specials"
    DAILY_SPECIAL = "daily_special"
    PARTY_SPECIAL = "party_special"
    SPECIALS_PROMPT = "specials_prompt"
    ACTIONS_MENU = "actions_menu"
    TESTIMONIALS = "testimonials"


# Synonyms are intentional; several phrasings lead to the same reply.
KEYWORD_ACTIONS: dict[str, ReplyAction] = {
    "today's special": ReplyAction.ALL_SPECIALS,
    "todays special": ReplyAction.ALL_SPECIALS,
    "special": ReplyAction.ALL_SPECIALS,
    "special dishes": ReplyAction.ALL_SPECIALS,
    "party": ReplyAction.PARTY_SPECIAL,
    "party special": ReplyAction.PARTY_SPECIAL,
    "menu": ReplyAction.MAIN_MENU,
    "opening hours": ReplyAction.OPENING_HOURS,
    # Reserved: gallery and reviews carousels are disabled
    "gallery": ReplyAction.NONE,
    "reviews": ReplyAction.NONE,
    "hungry": ReplyAction.NONE,
}

PAYLOAD_ACTIONS: dict[str, ReplyAction] = {
    PAYLOAD_MENU: ReplyAction.MAIN_MENU,
    PAYLOAD_LOCATION: ReplyAction.LOCATION,
    PAYLOAD_OPENING_HOURS: ReplyAction.OPENING_HOURS_WITH_PROMPT,
    PAYLOAD_ALL_SPECIAL: ReplyAction.ALL_SPECIALS,
    PAYLOAD_DAILY_SPECIAL: ReplyAction.DAILY_SPECIAL,
    PAYLOAD_PARTY_SPECIAL: ReplyAction.PARTY_SPECIAL,
    PAYLOAD_ALL_SPECIAL_BACK: ReplyAction.ACTIONS_MENU,
    PAYLOAD_DAILY_SPECIAL_BACK: ReplyAction.ACTIONS_MENU,
    PAYLOAD_PARTY_SPECIAL_BACK: ReplyAction.ACTIONS_MENU,
    PAYLOAD_MAIN_MENU_BACK: ReplyAction.SPECIALS_PROMPT,
    PAYLOAD_TESTIMONIALS: ReplyAction.TESTIMONIALS,
    PAYLOAD_REVIEWS: ReplyAction.NONE,
    PAYLOAD_START_OVER: ReplyAction.WELCOME,
    PAYLOAD_GET_STARTED: ReplyAction.NONE,
}


@dataclass(frozen=True)
class ReplyPlan:
    """What to send for one action, in order."""

    typing_indicator: bool = False
    messages: tuple[OutboundMessage, ...] = ()
    follow_up: OutboundMessage | None = None

    @property
    def is_empty(self) -> bool:
        return not self.messages and self.follow_up is None


def _with_typing(
    *messages: OutboundMessage, follow_up: OutboundMessage | None = None
) -> ReplyPlan:
    return ReplyPlan(typing_indicator=True, messages=messages, follow_up=follow_up)


_PLAN_BUILDERS: dict[ReplyAction, Callable[[], ReplyPlan]] = {
    ReplyAction.NONE: ReplyPlan,
    ReplyAction.WELCOME: lambda: _with_typing(content.welcome_message()),
    ReplyAction.WELCOME_WITH_GREETING: lambda: _with_typing(
        content.welcome_message(), follow_up=content.greeting_text()
    ),
    ReplyAction.MAIN_MENU: lambda: _with_typing(content.main_menu()),
    ReplyAction.LOCATION: lambda: _with_typing(
        content.location_template(), follow_up=content.specials_prompt()
    ),
    ReplyAction.OPENING_HOURS: lambda: _with_typing(content.opening_hours_text()),
    ReplyAction.OPENING_HOURS_WITH_PROMPT: lambda: _with_typing(
        content.opening_hours_text(), follow_up=content.specials_prompt()
    ),
    ReplyAction.ALL_SPECIALS: lambda: _with_typing(content.all_specials()),
    ReplyAction.DAILY_SPECIAL: lambda: _with_typing(content.daily_special()),
    ReplyAction.PARTY_SPECIAL: lambda: _with_typing(content.party_special()),
    ReplyAction.SPECIALS_PROMPT: lambda: ReplyPlan(messages=(content.specials_prompt(),)),
    ReplyAction.ACTIONS_MENU: lambda: ReplyPlan(messages=(content.actions_prompt(),)),
    ReplyAction.TESTIMONIALS: lambda: ReplyPlan(messages=(content.testimonials_text(),)),
}


class ReplyComposer:
    """Turn reply actions into sends on a messaging service.

    Example:
        >>> composer = ReplyComposer(MockMessagingService())
        >>> action = composer.action_for_text("MENU")
        >>> await composer.reply("user123", action)
    """

    def __init__(
        self,
        sender: MessagingService,
        follow_up_delay_seconds: float = FOLLOW_UP_DELAY_SECONDS,
    ):
        self._sender = sender
        self._follow_up_delay = follow_up_delay_seconds

    @staticmethod
    def action_for_text(text: str) -> ReplyAction:
        """Match free text against the keyword table; unknown text gets the welcome."""
        return KEYWORD_ACTIONS.get(text.lower(), ReplyAction.WELCOME_WITH_GREETING)

    @staticmethod
    def action_for_payload(payload: str | None) -> ReplyAction:
        """Match a payload token verbatim; empty or unknown payloads get the welcome."""
        if not payload:
            return ReplyAction.WELCOME
        return PAYLOAD_ACTIONS.get(payload, ReplyAction.WELCOME)

    @staticmethod
    def plan_for(action: ReplyAction) -> ReplyPlan:
        return _PLAN_BUILDERS[action]()

    async def reply(self, recipient_id: str, action: ReplyAction) -> list[SendResult]:
        """Send the plan for ``action`` and schedule its follow-up, if any.

        Returns:
            Results of the immediate sends, typing indicator included
        """
        plan = self.plan_for(action)
        if plan.is_empty:
            logfire.info(
                "No reply for action", recipient_id=recipient_id, action=action.value
            )
            return []

        outgoing: list[OutboundMessage] = list(plan.messages)
        if plan.typing_indicator:
            outgoing.insert(0, TYPING_ON)

        results = [await self._send(recipient_id, message, action) for message in outgoing]

        if plan.follow_up is not None:
            self._sender.send_later(recipient_id, plan.follow_up, self._follow_up_delay)
            logfire.info(
                "Follow-up scheduled",
                recipient_id=recipient_id,
                action=action.value,
                delay_seconds=self._follow_up_delay,
            )

        return results

    async def confirm_authentication(self, recipient_id: str) -> SendResult:
        """Tell the user a Send-to-Messenger optin went through."""
        return await self._send(
            recipient_id, content.authentication_confirmation(), action=None
        )

    async def _send(
        self,
        recipient_id: str,
        message: OutboundMessage,
        action: ReplyAction | None,
    ) -> SendResult:
        result = await self._sender.send(recipient_id, message)
        if not result.ok:
            logfire.warning(
                "Reply send failed",
                recipient_id=recipient_id,
                action=action.value if action else None,
                message_kind=message.kind,
                status_code=result.error.status_code,
                response_body=result.error.body,
            )
        return result
