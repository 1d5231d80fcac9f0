"""Canned restaurant content and the reply messages built from it.

Everything here is static data. The builders assemble a fresh, frozen
outbound message on every call and cannot fail.
"""

from typing import NamedTuple

from src.constants import (
    PAYLOAD_ALL_SPECIAL,
    PAYLOAD_ALL_SPECIAL_BACK,
    PAYLOAD_DAILY_SPECIAL,
    PAYLOAD_DAILY_SPECIAL_BACK,
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
from src.models.outbound import (
    DefaultAction,
    GenericTemplateMessage,
    PhoneNumberButton,
    PostbackButton,
    QuickReply,
    QuickReplyMessage,
    TemplateElement,
    TextMessage,
    WebUrlButton,
)

# =============================================================================
# Business details
# =============================================================================

RESTAURANT_NAME = "Famous Greek Salads"
WEBSITE_URL = "https://www.famousgreeksalads.com"
ORDER_URL = f"{WEBSITE_URL}/order-food-online"
PHONE_NUMBER = "+17277974998"

HERO_IMAGE_URL = f"{WEBSITE_URL}/_upload/slideshow/13401483603012685235.jpg"
DISH_IMAGE_URL = f"{WEBSITE_URL}/_upload/slideshow/13401465644405939908.jpg"
WELCOME_IMAGE_URL = f"{WEBSITE_URL}/_upload/slideshow/13401481191902759378.jpg"

MAP_IMAGE_URL = (
    "https://maps.googleapis.com/maps/api/staticmap"
    "?center=28.0123703,-82.7125298"
    "&markers=color:red%7Clabel:C%7C28.012431,-82.7138837"
    "&zoom=16&size=600x400"
)
MAP_URL = (
    "https://www.google.com/maps/place/Famous+Greek+Salads/"
    "@28.012431,-82.7138837,17z"
)

OPENING_HOURS_TEXT = (
    "RESTAURANT HOURS\n"
    "Sunday 11:00AM - 04:00PM\n"
    "Monday thru Saturday 11:00AM - 08:30PM"
)
GREETING_TEXT = "Hi, we're happy to see you!"
TESTIMONIALS_TEXT = (
    "Famous Greek Salads offers fresh and healthy Greek food at reasonable "
    "prices. Catering Available."
)
AUTHENTICATION_TEXT = "Authentication successful"
SPECIALS_PROMPT_TEXT = "Checkout our most appreciated dishes by our customers"
ACTIONS_PROMPT_TEXT = "Get Connected with us..."


class MenuCategory(NamedTuple):
    title: str
    path: str
    image_url: str


class Dish(NamedTuple):
    title: str
    subtitle: str
    image_url: str


FAMILY_MEALS_URL = f"{ORDER_URL}/Family-Meals/c=5864/clear/"
FAMOUS_FAVORITES_URL = f"{ORDER_URL}/Famous-Favorites/c=6239/clear/"
PARTY_PLATTERS_URL = f"{ORDER_URL}/Party-Platters/c=2761/clear/"

MENU_CATEGORIES: tuple[MenuCategory, ...] = (
    MenuCategory("Family Meals", "Family-Meals/c=5864", HERO_IMAGE_URL),
    MenuCategory("Soups & Starters", "Soups-and-Starters/c=1518", DISH_IMAGE_URL),
    MenuCategory("Salads", "Salads/c=1519", DISH_IMAGE_URL),
    MenuCategory("Party Salads", "Party-Salads/c=1587", DISH_IMAGE_URL),
    MenuCategory("Party Platters", "Party-Platters/c=2761", DISH_IMAGE_URL),
    MenuCategory("Beverages", "Beverages/c=1526", DISH_IMAGE_URL),
)

ALL_SPECIALS: tuple[Dish, ...] = (
    Dish(
        "1/4 Greek Chicken",
        "Marinated and baked crisp with oregano and lemon served with a side "
        "Greek salad and choice of Greek potatoes or rice.",
        HERO_IMAGE_URL,
    ),
    Dish(
        "Famous Greek Combo",
        "Choice of Grilled Chicken or Sliced Gyro over rice with a side Greek "
        "salad and choice of any Famous Spread with pita!",
        DISH_IMAGE_URL,
    ),
    Dish(
        "Moussaka",
        "Layers of eggplant, ground beef, and a creamy bechamel with a hint of "
        "cinnamon. Served with a side Greek salad!",
        DISH_IMAGE_URL,
    ),
)

DAILY_SPECIALS: tuple[Dish, ...] = (
    Dish(
        "Family Meal for 4 - Grilled Chicken with Rice!",
        "Choice of sliced gyro or grilled chicken, a family size Greek salad, "
        "and tzatziki or hummus with pita!",
        HERO_IMAGE_URL,
    ),
    Dish(
        "Family Meal for 4 - Subs and Pitas",
        "A great selection of our Famous sandwiches with a family size Greek salad!",
        DISH_IMAGE_URL,
    ),
    Dish(
        "Family Meal for 6 - Grilled Chicken with Rice!",
        "Choice of grilled chicken or sliced gyro, a family size Greek salad, "
        "and choice of tzatziki or hummus with pita!",
        DISH_IMAGE_URL,
    ),
)

PARTY_SPECIALS: tuple[Dish, ...] = (
    Dish(
        "Chicken Souvlaki Or Gyro Platter",
        "This platter gives your guests a chance to build their own gyro with "
        "the pita, lettuce, tomato, onion, and tzatziki sauce all separate.",
        HERO_IMAGE_URL,
    ),
    Dish(
        "Deli Wrap Tray",
        "Our wraps are prepared on tomato basil and spinach tortillas. "
        "Choose up to 3 options!",
        DISH_IMAGE_URL,
    ),
    Dish("Famous Cubans Tray", "Always a party favorite!", DISH_IMAGE_URL),
)


# =============================================================================
# Builders
# =============================================================================


def welcome_message() -> GenericTemplateMessage:
    """Welcome card with the three entry points of the conversation."""
    return GenericTemplateMessage(
        elements=(
            TemplateElement(
                title=f"Welcome to {RESTAURANT_NAME}",
                subtitle="Try Delicious Food",
                image_url=WELCOME_IMAGE_URL,
                default_action=DefaultAction(
                    url=WEBSITE_URL,
                    messenger_extensions=True,
                    webview_height_ratio="tall",
                    fallback_url=WEBSITE_URL,
                ),
                buttons=(
                    PostbackButton(title="Menu", payload=PAYLOAD_MENU),
                    PostbackButton(title="Our Location", payload=PAYLOAD_LOCATION),
                    PostbackButton(
                        title="Opening Hours", payload=PAYLOAD_OPENING_HOURS
                    ),
                ),
            ),
        )
    )


def main_menu() -> GenericTemplateMessage:
    elements = []
    for category in MENU_CATEGORIES:
        url = f"{ORDER_URL}/{category.path}/clear/"
        elements.append(
            TemplateElement(
                title=category.title,
                item_url=url,
                image_url=category.image_url,
                buttons=(
                    WebUrlButton(title="Checkout", url=url),
                    PhoneNumberButton(title="Call", payload=PHONE_NUMBER),
                    PostbackButton(title="Back", payload=PAYLOAD_MAIN_MENU_BACK),
                ),
            )
        )
    return GenericTemplateMessage(elements=tuple(elements))


def _dish_carousel(
    dishes: tuple[Dish, ...], order_url: str, back_payload: str
) -> GenericTemplateMessage:
    return GenericTemplateMessage(
        elements=tuple(
            TemplateElement(
                title=dish.title,
                subtitle=dish.subtitle,
                item_url=order_url,
                image_url=dish.image_url,
                buttons=(
                    WebUrlButton(title="Checkout", url=order_url),
                    PostbackButton(title="Back", payload=back_payload),
                ),
            )
            for dish in dishes
        )
    )


def all_specials() -> GenericTemplateMessage:
    return _dish_carousel(ALL_SPECIALS, FAMOUS_FAVORITES_URL, PAYLOAD_ALL_SPECIAL_BACK)


def daily_special() -> GenericTemplateMessage:
    return _dish_carousel(DAILY_SPECIALS, FAMILY_MEALS_URL, PAYLOAD_DAILY_SPECIAL_BACK)


def party_special() -> GenericTemplateMessage:
    return _dish_carousel(
        PARTY_SPECIALS, PARTY_PLATTERS_URL, PAYLOAD_PARTY_SPECIAL_BACK
    )


def location_template() -> GenericTemplateMessage:
    return GenericTemplateMessage(
        elements=(
            TemplateElement(
                title=RESTAURANT_NAME,
                image_url=MAP_IMAGE_URL,
                item_url=MAP_URL,
            ),
        )
    )


def opening_hours_text() -> TextMessage:
    return TextMessage(text=OPENING_HOURS_TEXT)


def specials_prompt() -> QuickReplyMessage:
    """Quick replies leading to the three specials carousels."""
    return QuickReplyMessage(
        text=SPECIALS_PROMPT_TEXT,
        quick_replies=(
            QuickReply(title="Special Dishes", payload=PAYLOAD_ALL_SPECIAL),
            QuickReply(title="Daily Special", payload=PAYLOAD_DAILY_SPECIAL),
            QuickReply(title="Party Special", payload=PAYLOAD_PARTY_SPECIAL),
        ),
    )


def actions_prompt() -> QuickReplyMessage:
    """Quick replies offered after backing out of a specials carousel."""
    return QuickReplyMessage(
        text=ACTIONS_PROMPT_TEXT,
        quick_replies=(
            QuickReply(title="Testimonials", payload=PAYLOAD_TESTIMONIALS),
            QuickReply(title="Reviews", payload=PAYLOAD_REVIEWS),
            QuickReply(title="Start Over", payload=PAYLOAD_START_OVER),
        ),
    )


def testimonials_text() -> TextMessage:
    return TextMessage(text=TESTIMONIALS_TEXT)


def greeting_text() -> TextMessage:
    return TextMessage(text=GREETING_TEXT)


def authentication_confirmation() -> TextMessage:
    return TextMessage(text=AUTHENTICATION_TEXT)
