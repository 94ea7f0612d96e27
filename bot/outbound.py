"""
Outbound Requests
=================
What the bot core asks the transport to do, and the code that does it.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from telegram import Bot, InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove
from telegram.constants import ParseMode

logger = logging.getLogger(__name__)

ReplyMarkup = Union[ReplyKeyboardMarkup, ReplyKeyboardRemove, InlineKeyboardMarkup]


@dataclass(frozen=True)
class SendMessage:
    chat_id: int
    text: str
    reply_markup: Optional[ReplyMarkup] = None
    parse_mode: Optional[str] = None


@dataclass(frozen=True)
class EditMessage:
    chat_id: int
    message_id: int
    text: str
    parse_mode: Optional[str] = None


@dataclass(frozen=True)
class AnswerCallback:
    callback_id: str
    text: Optional[str] = None


Outbound = Union[SendMessage, EditMessage, AnswerCallback]

MARKDOWN = ParseMode.MARKDOWN


async def dispatch(bot: Bot, requests: Iterable[Outbound]):
    """Execute outbound requests in order."""
    for request in requests:
        if isinstance(request, SendMessage):
            await bot.send_message(
                chat_id=request.chat_id,
                text=request.text,
                reply_markup=request.reply_markup,
                parse_mode=request.parse_mode,
            )
        elif isinstance(request, EditMessage):
            await bot.edit_message_text(
                text=request.text,
                chat_id=request.chat_id,
                message_id=request.message_id,
                parse_mode=request.parse_mode,
            )
        elif isinstance(request, AnswerCallback):
            await bot.answer_callback_query(
                callback_query_id=request.callback_id,
                text=request.text,
            )
        else:
            logger.error(f"Unknown outbound request: {request!r}")
