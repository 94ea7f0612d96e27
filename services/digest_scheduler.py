"""
Digest Scheduler - Pushes the report digest on a schedule
=========================================================
Runs on the application's JobQueue, independent of any user session.
Delivery is best effort: one failed recipient never stops the others.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import time
from typing import Collection, Optional
from zoneinfo import ZoneInfo

from telegram import Bot
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import CallbackContext, Job, JobQueue

from errors import StorageError
from data.report_store import ReportStore
from services.digest_formatter import format_digest, split_message

logger = logging.getLogger(__name__)

JOB_NAME = "daily_digest"


@dataclass(frozen=True)
class CronSchedule:
    """Fire time parsed from a cron expression. Days use 0 = Sunday."""
    minute: int
    hour: int
    days: tuple[int, ...]


def _parse_days(field_value: str) -> tuple[int, ...]:
    if field_value == "*":
        return tuple(range(7))

    days = set()
    for part in field_value.split(","):
        if "-" in part:
            start, end = (int(x) for x in part.split("-", 1))
            if start > end:
                raise ValueError(f"Bad day-of-week range: {part}")
            values = range(start, end + 1)
        else:
            values = [int(part)]
        for value in values:
            if not 0 <= value <= 7:
                raise ValueError(f"Day-of-week out of range: {value}")
            days.add(value % 7)
    return tuple(sorted(days))


def parse_cron(expression: str) -> CronSchedule:
    """
    Parse "minute hour day-of-month month day-of-week".

    Only fixed minute/hour and a day-of-week set are supported;
    day-of-month and month must be "*".

    Raises:
        ValueError: Unsupported or malformed expression
    """
    fields = expression.split()
    if len(fields) != 5:
        raise ValueError(f"Cron expression needs 5 fields: {expression!r}")

    minute_field, hour_field, dom_field, month_field, dow_field = fields
    if dom_field != "*" or month_field != "*":
        raise ValueError(f"Day-of-month and month must be '*': {expression!r}")

    try:
        minute = int(minute_field)
        hour = int(hour_field)
        days = _parse_days(dow_field)
    except ValueError as e:
        raise ValueError(f"Bad cron expression {expression!r}: {e}") from e

    if not 0 <= minute <= 59 or not 0 <= hour <= 23:
        raise ValueError(f"Time out of range in {expression!r}")

    return CronSchedule(minute=minute, hour=hour, days=days)


@dataclass
class DigestDelivery:
    """Outcome of one digest run."""
    delivered: list[int] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)


class DigestScheduler:
    """Sends the digest of all stored reports to every allowed user."""

    def __init__(self, store: ReportStore, recipients: Collection[int]):
        self.store = store
        self.recipients = sorted(recipients)

    def schedule(self, job_queue: JobQueue, cron: str, timezone: str) -> Job:
        """Register the daily job. Raises ValueError for a bad cron expression."""
        schedule = parse_cron(cron)
        fire_at = time(hour=schedule.hour, minute=schedule.minute, tzinfo=ZoneInfo(timezone))

        job = job_queue.run_daily(self.job_callback, time=fire_at, days=schedule.days, name=JOB_NAME)
        logger.info(
            f"Digest scheduled at {schedule.hour:02d}:{schedule.minute:02d} {timezone}, "
            f"days {schedule.days}, {len(self.recipients)} recipient(s)"
        )
        return job

    async def job_callback(self, context: CallbackContext):
        await self.publish(context.bot)

    def build_message(self) -> str:
        reports = self.store.list_all()
        return format_digest(reports, single_category=False)

    async def publish(self, bot: Bot) -> Optional[DigestDelivery]:
        """
        Send the digest to every recipient.

        Returns:
            Per-recipient outcome, or None if the reports could not be loaded
        """
        try:
            text = await asyncio.to_thread(self.build_message)
        except StorageError as e:
            logger.error(f"Digest skipped, cannot load reports: {e}")
            return None

        chunks = split_message(text)
        delivery = DigestDelivery()

        for user_id in self.recipients:
            try:
                for chunk in chunks:
                    await bot.send_message(chat_id=user_id, text=chunk, parse_mode=ParseMode.MARKDOWN)
            except TelegramError as e:
                logger.error(f"Failed to send digest to {user_id}: {e}")
                delivery.failed[user_id] = str(e)
            else:
                delivery.delivered.append(user_id)

        logger.info(f"Digest sent to {len(delivery.delivered)} of {len(self.recipients)} recipient(s)")
        if delivery.failed:
            logger.warning(f"Digest failed for: {', '.join(map(str, delivery.failed))}")
        return delivery
