"""
Language Support Module
=======================
Lookup of UI strings and plural forms for the bot.
"""

import logging

from lang.ru import STRINGS

logger = logging.getLogger(__name__)

LANGUAGE = "ru"


def get(key: str, **kwargs) -> str:
    """
    Get a localized string by key.

    Args:
        key: The string key
        **kwargs: Format arguments

    Returns:
        The localized string, or the key if not found
    """
    text = STRINGS.get(key)
    if text is None:
        logger.warning(f"Missing string '{key}'")
        return key

    if kwargs:
        try:
            text = text.format(**kwargs)
        except KeyError as e:
            logger.warning(f"Missing format key {e} for string '{key}'")

    return text


def plural(count: int, one: str, few: str, many: str) -> str:
    """
    Pick the Russian plural form for a count.

    1, 21, 101 -> one; 2-4, 22-24 -> few; 0, 5-20, 25-30 -> many.
    """
    count = abs(count)
    if count % 10 == 1 and count % 100 != 11:
        return one
    if 2 <= count % 10 <= 4 and not 12 <= count % 100 <= 14:
        return few
    return many


# Shortcut alias
_ = get
