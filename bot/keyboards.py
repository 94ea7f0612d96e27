"""
Keyboards
=========
Menu buttons and the reply keyboards built from them.
"""

from enum import Enum
from typing import Optional

from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove

from lang import _ as t
from data.report_store import Category


class Button(Enum):
    """Reply keyboard buttons. Values are string keys in lang."""
    ENTER = "btn_enter"
    VIEW = "btn_view"
    DELETE = "btn_delete"
    VERIFICATION = "btn_verification"
    BACK = "btn_back"
    ALL = "btn_all"
    OVERHEAT = "btn_overheat"
    DEVIATION = "btn_deviation"
    BREAKDOWN = "btn_breakdown"
    UNCLEAR = "btn_unclear"

    @property
    def label(self) -> str:
        return t(self.value)

    @property
    def category(self) -> Optional[Category]:
        """Category selected by this button, if it is a category button."""
        return _BUTTON_CATEGORIES.get(self)

    @classmethod
    def from_label(cls, text: str) -> Optional["Button"]:
        """Match a message text against the button labels."""
        text = text.strip()
        for button in cls:
            if button.label == text:
                return button
        return None


_BUTTON_CATEGORIES = {
    Button.OVERHEAT: Category.OVERHEAT,
    Button.DEVIATION: Category.DEVIATION,
    Button.BREAKDOWN: Category.BREAKDOWN,
    Button.UNCLEAR: Category.UNCLEAR,
}


def _keyboard(rows: list[list[Button]]) -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        [[button.label for button in row] for row in rows],
        resize_keyboard=True,
    )


def category_label(category: Category) -> str:
    return t(f"category_{category.value}")


def main_menu() -> ReplyKeyboardMarkup:
    return _keyboard([
        [Button.ENTER, Button.VIEW],
        [Button.DELETE, Button.VERIFICATION],
    ])


def input_menu() -> ReplyKeyboardMarkup:
    return _keyboard([
        [Button.OVERHEAT, Button.DEVIATION],
        [Button.BREAKDOWN, Button.UNCLEAR],
        [Button.BACK],
    ])


def view_menu() -> ReplyKeyboardMarkup:
    return _keyboard([
        [Button.OVERHEAT, Button.DEVIATION],
        [Button.BREAKDOWN, Button.UNCLEAR],
        [Button.ALL],
        [Button.BACK],
    ])


def delete_menu() -> ReplyKeyboardMarkup:
    return view_menu()


def remove_keyboard() -> ReplyKeyboardRemove:
    return ReplyKeyboardRemove()
