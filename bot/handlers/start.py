"""
Start & Help Handlers
=====================
Handles /start and /help commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from bot.events import event_from_message
from bot.handlers.common import process


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start - reset to the main menu."""
    await process(context, event_from_message(update))


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await process(context, event_from_message(update))
