"""
Inbound Events
==============
Every update is turned into exactly one of these at the Telegram boundary.
"""

from dataclasses import dataclass
from typing import Optional, Union

from telegram import Update

from bot.keyboards import Button


@dataclass(frozen=True)
class FreeText:
    user_id: int
    chat_id: int
    display_name: Optional[str]
    text: str


@dataclass(frozen=True)
class MenuButton:
    user_id: int
    chat_id: int
    display_name: Optional[str]
    button: Button


@dataclass(frozen=True)
class Command:
    user_id: int
    chat_id: int
    display_name: Optional[str]
    name: str
    text: str = ""


@dataclass(frozen=True)
class Selection:
    user_id: int
    chat_id: int
    display_name: Optional[str]
    token: str
    callback_id: str
    message_id: Optional[int] = None


Event = Union[FreeText, MenuButton, Command, Selection]


def parse_text(user_id: int, chat_id: int, display_name: Optional[str], text: str) -> Event:
    """Classify a text message as a command, a menu button or free text."""
    stripped = text.strip()

    if stripped.startswith("/"):
        # "/start@SomeBot arg" -> "start"
        name = stripped[1:].split(maxsplit=1)[0] if len(stripped) > 1 else ""
        return Command(user_id, chat_id, display_name, name.split("@")[0].lower(), text)

    button = Button.from_label(stripped)
    if button is not None:
        return MenuButton(user_id, chat_id, display_name, button)

    return FreeText(user_id, chat_id, display_name, text)


def display_name_of(update: Update) -> Optional[str]:
    """Username, falling back to first name."""
    user = update.effective_user
    if user is None:
        return None
    return user.username or user.first_name


def event_from_message(update: Update) -> Optional[Event]:
    """Build an event from a text message update."""
    message = update.effective_message
    user = update.effective_user
    if message is None or user is None or message.text is None:
        return None
    return parse_text(user.id, message.chat_id, display_name_of(update), message.text)


def event_from_callback(update: Update) -> Optional[Selection]:
    """Build a selection event from an inline button press."""
    query = update.callback_query
    if query is None or query.data is None:
        return None

    message = query.message
    return Selection(
        user_id=query.from_user.id,
        chat_id=message.chat.id if message else query.from_user.id,
        display_name=display_name_of(update),
        token=query.data,
        callback_id=query.id,
        message_id=message.message_id if message else None,
    )
