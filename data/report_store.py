"""
Report Store - Persistent field reports
=======================================
CRUD over a single SQLite table of reports.
Every call opens its own connection and closes it before returning.
"""

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

import config
from errors import StorageError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Category(Enum):
    """Fixed classification of a report."""
    OVERHEAT = "overheat"
    DEVIATION = "deviation"
    BREAKDOWN = "breakdown"
    UNCLEAR = "unclear"


@dataclass(frozen=True)
class Report:
    """A single stored report line."""
    id: int
    user_id: int
    display_name: Optional[str]
    category: Category
    content: str
    created_at: str  # "YYYY-MM-DD HH:MM:SS" in the store's display timezone

    @property
    def date(self) -> str:
        return self.created_at.split(" ")[0]

    @property
    def time(self) -> str:
        parts = self.created_at.split(" ")
        return parts[1] if len(parts) > 1 else ""


_CATEGORY_VALUES = ", ".join(f"'{c.value}'" for c in Category)

SCHEMA = f"""
CREATE TABLE IF NOT EXISTS reports (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    username TEXT,
    report_type TEXT NOT NULL CHECK (report_type IN ({_CATEGORY_VALUES})),
    content TEXT NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
)
"""

_SELECT = "SELECT id, user_id, username, report_type, content, created_at FROM reports"
_ORDER = "ORDER BY created_at DESC, id DESC"


class ReportStore:
    """Stores reports in SQLite, one connection per operation."""

    def __init__(self, db_path: Path, timezone: Optional[str] = None, timeout: float = 5.0):
        self.db_path = Path(db_path)
        self.tz = ZoneInfo(timezone) if timezone else None
        self.timeout = timeout

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success, always close."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database {self.db_path}: {e}") from e
        try:
            with conn:
                yield conn
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        finally:
            conn.close()

    def _now(self) -> datetime:
        """Current time in UTC, naive. Stored timestamps are always UTC."""
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def _display_time(self, stored: str) -> str:
        """Convert a stored UTC timestamp to the display timezone."""
        if self.tz is None:
            return stored
        try:
            moment = datetime.strptime(stored, TIMESTAMP_FORMAT)
        except ValueError:
            return stored
        local = moment.replace(tzinfo=timezone.utc).astimezone(self.tz)
        return local.strftime(TIMESTAMP_FORMAT)

    def initialize(self):
        """Create the reports table if it does not exist yet."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create database directory: {e}") from e

        with self._connect() as conn:
            conn.execute(SCHEMA)
        logger.info(f"Report store ready at {self.db_path}")

    def save(self, user_id: int, display_name: Optional[str], category: Category, content: str):
        """Append one report stamped with the current time."""
        self.save_many(user_id, display_name, category, [content])

    def save_many(
        self,
        user_id: int,
        display_name: Optional[str],
        category: Category,
        contents: list[str],
    ) -> int:
        """Append several reports in one transaction. Returns how many were written."""
        created_at = self._now().strftime(TIMESTAMP_FORMAT)
        rows = [(user_id, display_name, category.value, content, created_at) for content in contents]

        with self._connect() as conn:
            conn.executemany(
                "INSERT INTO reports (user_id, username, report_type, content, created_at) "
                "VALUES (?, ?, ?, ?, ?)",
                rows,
            )

        logger.info(f"Saved {len(rows)} {category.value} report(s) for user {user_id}")
        return len(rows)

    def list_recent(self, category: Optional[Category] = None) -> list[Report]:
        """Reports from the trailing window, newest first."""
        cutoff = self._now() - timedelta(hours=config.RECENT_WINDOW_HOURS)
        return self._query(category, since=cutoff.strftime(TIMESTAMP_FORMAT))

    def list_all(self, category: Optional[Category] = None) -> list[Report]:
        """All reports regardless of age, newest first."""
        return self._query(category)

    def find(self, report_id: int) -> Optional[Report]:
        """Get a report by ID, or None."""
        with self._connect() as conn:
            row = conn.execute(f"{_SELECT} WHERE id = ?", (report_id,)).fetchone()
        return self._to_report(row) if row else None

    def delete(self, report_id: int):
        """Delete a report. Deleting a missing ID is not an error."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM reports WHERE id = ?", (report_id,))
        if cursor.rowcount:
            logger.info(f"Deleted report {report_id}")

    def _query(self, category: Optional[Category], since: Optional[str] = None) -> list[Report]:
        clauses = []
        params = []
        if category is not None:
            clauses.append("report_type = ?")
            params.append(category.value)
        if since is not None:
            clauses.append("created_at >= ?")
            params.append(since)

        sql = _SELECT
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " " + _ORDER

        with self._connect() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._to_report(row) for row in rows]

    def _to_report(self, row: tuple) -> Report:
        report_id, user_id, username, report_type, content, created_at = row
        return Report(
            id=report_id,
            user_id=user_id,
            display_name=username,
            category=Category(report_type),
            content=content,
            created_at=self._display_time(str(created_at)),
        )


# Singleton instance
report_store = ReportStore(config.DB_PATH, timezone=config.TIMEZONE)
