"""
Verification Reader - Devices due for verification
==================================================
Reads the device spreadsheet and lists verifications coming up soon.
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from openpyxl import load_workbook
from telegram.helpers import escape_markdown

import config
from lang import _ as t
from errors import ExternalFileError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationEntry:
    """A device with an upcoming verification date."""
    name: str
    verification_date: date
    days_remaining: int


def add_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping to the end of the month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _as_date(value) -> Optional[date]:
    """Only real date/time cells count as dates."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


class VerificationReader:
    """Reads upcoming device verifications from an .xlsx file."""

    def __init__(
        self,
        path: Path,
        name_columns: Sequence[int] = config.VERIFICATION_NAME_COLUMNS,
        date_column: int = config.VERIFICATION_DATE_COLUMN,
        horizon_months: int = config.VERIFICATION_HORIZON_MONTHS,
        timezone: str = config.TIMEZONE,
    ):
        self.path = Path(path)
        self.name_columns = tuple(name_columns)
        self.date_column = date_column
        self.horizon_months = horizon_months
        self.timezone = ZoneInfo(timezone)

    def today(self) -> date:
        """Current date in the configured timezone."""
        return datetime.now(self.timezone).date()

    def entries(self, today: Optional[date] = None) -> list[VerificationEntry]:
        """
        Parse the spreadsheet.

        Returns:
            Entries with today <= date <= today + horizon, soonest first

        Raises:
            ExternalFileError: File missing or unreadable
        """
        today = today or self.today()
        horizon = add_months(today, self.horizon_months)

        if not self.path.exists():
            raise ExternalFileError(f"Verification file not found: {self.path}")

        try:
            workbook = load_workbook(self.path, read_only=True, data_only=True)
        except Exception as e:
            raise ExternalFileError(f"Cannot open {self.path.name}: {e}") from e

        entries = []
        try:
            sheet = workbook.active
            for row in sheet.iter_rows(min_row=2, values_only=True):
                entry = self._parse_row(row, today)
                if entry and today <= entry.verification_date <= horizon:
                    entries.append(entry)
        except Exception as e:
            raise ExternalFileError(f"Cannot read {self.path.name}: {e}") from e
        finally:
            workbook.close()

        entries.sort(key=lambda e: e.verification_date)
        return entries

    def _parse_row(self, row: tuple, today: date) -> Optional[VerificationEntry]:
        parts = []
        for index in self.name_columns:
            value = row[index] if index < len(row) else None
            if value is not None and str(value).strip():
                parts.append(str(value).strip())
        name = " ".join(parts)

        value = row[self.date_column] if self.date_column < len(row) else None
        verification_date = _as_date(value)

        if not name or verification_date is None:
            return None

        return VerificationEntry(
            name=name,
            verification_date=verification_date,
            days_remaining=(verification_date - today).days,
        )

    def read(self, today: Optional[date] = None) -> str:
        """Render upcoming verifications as Markdown text. Never raises."""
        if not self.path.exists():
            return t("verification_file_missing")

        try:
            entries = self.entries(today)
        except ExternalFileError as e:
            logger.error(f"Verification file error: {e}")
            return t("verification_error", error=escape_markdown(str(e), version=1))

        if not entries:
            return t("verification_empty", months=self.horizon_months)

        lines = [t("verification_title", months=self.horizon_months), ""]
        for index, entry in enumerate(entries, 1):
            lines.append(t(
                "verification_item",
                index=index,
                name=escape_markdown(entry.name, version=1),
                date=entry.verification_date.strftime("%d.%m.%Y"),
                days=entry.days_remaining,
            ))
        return "\n".join(lines)


# Singleton instance
verification_reader = VerificationReader(config.VERIFICATION_FILE)
