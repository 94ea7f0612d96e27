"""
Delete Handlers
===============
Inline "delete_<id>" selections from a deletion listing.
"""

import logging

from telegram import Update
from telegram.ext import ContextTypes

from bot.events import event_from_callback
from bot.handlers.common import process

logger = logging.getLogger(__name__)


async def delete_callback_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle a tap on a report in the deletion listing."""
    event = event_from_callback(update)
    if event is None:
        logger.warning("Callback query without data")
        return
    await process(context, event)
