"""
Bot Handlers
============
Export all handlers for easy import.
"""

from bot.handlers.start import (
    start_command,
    help_command,
)

from bot.handlers.menu import (
    text_message_handler,
)

from bot.handlers.delete import (
    delete_callback_handler,
)

__all__ = [
    # Start
    "start_command",
    "help_command",
    # Menu
    "text_message_handler",
    # Delete
    "delete_callback_handler",
]
