"""
Menu Handlers
=============
Every other text message: menu buttons, report lines, unknown commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from bot.events import event_from_message
from bot.handlers.common import process


async def text_message_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Route a text message through the session machine."""
    await process(context, event_from_message(update))
