"""
Delete Workflow
===============
Lists reports as inline buttons and deletes the one the user taps.
"""

import logging
from typing import Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

import config
from lang import _ as t
from errors import NotFoundError
from bot.events import Selection
from bot.keyboards import category_label, delete_menu
from bot.outbound import AnswerCallback, EditMessage, Outbound, SendMessage
from data.report_store import Category, Report, ReportStore

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "delete_"


def make_token(report_id: int) -> str:
    return f"{TOKEN_PREFIX}{report_id}"


def parse_token(token: str) -> int:
    """Extract the report ID from a selection token."""
    if not token.startswith(TOKEN_PREFIX):
        raise NotFoundError(f"Not a delete token: {token!r}")
    try:
        return int(token[len(TOKEN_PREFIX):])
    except ValueError:
        raise NotFoundError(f"Bad report ID in token: {token!r}")


def preview(content: str, length: int = config.DELETE_PREVIEW_LENGTH) -> str:
    """Short single-line preview for a button."""
    content = " ".join(content.split())
    if len(content) > length:
        return content[:length] + "..."
    return content


class DeleteWorkflow:
    """Renders deletion listings and handles selections."""

    def __init__(
        self,
        store: ReportStore,
        preview_length: int = config.DELETE_PREVIEW_LENGTH,
        list_limit: int = config.DELETE_LIST_LIMIT,
    ):
        self.store = store
        self.preview_length = preview_length
        self.list_limit = list_limit

    def button_text(self, report: Report, with_icon: bool = False) -> str:
        """Button caption: date, time and a content preview."""
        # "2026-10-18" -> "18.10"
        day = ".".join(reversed(report.date.split("-")[1:]))
        text = f"{day} {report.time[:5]} · {preview(report.content, self.preview_length)}"
        if with_icon:
            icon = category_label(report.category).split(" ")[0]
            text = f"{icon} {text}"
        return text

    def listing(self, chat_id: int, category: Optional[Category] = None) -> list[Outbound]:
        """Show selectable reports of a category, or of all categories."""
        reports = self.store.list_all(category)

        if not reports:
            return [SendMessage(chat_id, t("delete_nothing"), reply_markup=delete_menu())]

        shown = reports[:self.list_limit]
        keyboard = [
            [InlineKeyboardButton(
                self.button_text(report, with_icon=category is None),
                callback_data=make_token(report.id),
            )]
            for report in shown
        ]

        if category is None:
            text = t("delete_choose")
        else:
            text = t("delete_choose_category", category=category_label(category))
        if len(reports) > len(shown):
            text += "\n" + t("delete_truncated", limit=self.list_limit)

        return [SendMessage(chat_id, text, reply_markup=InlineKeyboardMarkup(keyboard))]

    def select(self, event: Selection) -> list[Outbound]:
        """Delete the selected report and replace the listing with a confirmation."""
        try:
            report_id = parse_token(event.token)
            report = self.store.find(report_id)
            if report is None:
                raise NotFoundError(f"Report {report_id} not found")
        except NotFoundError as e:
            logger.info(f"Stale delete selection from user {event.user_id}: {e}")
            return [AnswerCallback(event.callback_id, t("delete_not_found"))]

        self.store.delete(report.id)
        logger.info(f"User {event.user_id} deleted report {report.id} ({report.category.value})")

        requests: list[Outbound] = [AnswerCallback(event.callback_id, t("delete_done_short"))]
        confirmation = t("delete_done", content=report.content)
        if event.message_id is not None:
            requests.append(EditMessage(event.chat_id, event.message_id, confirmation))
        else:
            requests.append(SendMessage(event.chat_id, confirmation))
        return requests
