"""
Digest Formatter - Turns reports into chat text
===============================================
Timestamps are shown exactly as stored, no timezone conversion.
"""

from typing import Sequence

from telegram.constants import MessageLimit
from telegram.helpers import escape_markdown

from lang import _ as t
from bot.keyboards import category_label
from data.report_store import Report


def _escape(text: str) -> str:
    return escape_markdown(text, version=1)


def format_digest(reports: Sequence[Report], single_category: bool = False) -> str:
    """
    Render reports as Markdown text.

    Args:
        reports: Reports, newest first
        single_category: All reports share one category; list them under
            one header with date and time. Otherwise group by category in
            order of first appearance, listing time only.

    Returns:
        Message text (Markdown)
    """
    if not reports:
        return t("digest_empty")

    if single_category:
        category = reports[0].category
        text = t("digest_category_title", category=category_label(category)) + "\n\n"
        for report in reports:
            text += f"• {report.date} {report.time}\n  {_escape(report.content)}\n\n"
        return text.rstrip() + "\n"

    groups: dict = {}
    for report in reports:
        groups.setdefault(report.category, []).append(report)

    text = t("digest_title") + "\n\n"
    for category, items in groups.items():
        text += f"*{category_label(category)}*\n"
        for report in items:
            text += f"• {report.time} — {_escape(report.content)}\n"
        text += "\n"

    return text.rstrip() + "\n"


def split_message(text: str, limit: int = MessageLimit.MAX_TEXT_LENGTH) -> list[str]:
    """Split text into chunks of at most `limit` characters on line boundaries."""
    if len(text) <= limit:
        return [text]

    chunks = []
    current = ""
    for line in text.splitlines(keepends=True):
        # A single over-long line is cut hard
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        if len(current) + len(line) > limit:
            chunks.append(current)
            current = ""
        current += line

    if current:
        chunks.append(current)
    return chunks
