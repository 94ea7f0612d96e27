"""
Handler Helpers
===============
Run an inbound event through the session machine and send the result.
"""

import asyncio
import logging
from typing import Optional

from telegram.ext import ContextTypes

from bot.events import Event
from bot.machine import SessionMachine
from bot.outbound import dispatch

logger = logging.getLogger(__name__)

MACHINE_KEY = "machine"


def get_machine(context: ContextTypes.DEFAULT_TYPE) -> SessionMachine:
    return context.bot_data[MACHINE_KEY]


async def process(context: ContextTypes.DEFAULT_TYPE, event: Optional[Event]):
    """Handle one event and deliver the outbound requests."""
    if event is None:
        return
    # The machine does blocking file and database work
    requests = await asyncio.to_thread(get_machine(context).handle, event)
    await dispatch(context.bot, requests)
