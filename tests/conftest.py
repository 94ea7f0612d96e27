"""
Shared fixtures: a throwaway report store and a wired session machine.
"""
import sqlite3
from contextlib import closing

import pytest

from bot.delete_flow import DeleteWorkflow
from bot.machine import SessionMachine
from data.report_store import Category, ReportStore
from data.session_manager import SessionStore
from services.verification_reader import VerificationReader

ALLOWED_USER = 1
OTHER_ALLOWED_USER = 3
STRANGER = 2


@pytest.fixture
def store(tmp_path):
    report_store = ReportStore(tmp_path / "reports.db")
    report_store.initialize()
    return report_store


@pytest.fixture
def sessions():
    return SessionStore()


@pytest.fixture
def machine(store, sessions, tmp_path):
    return SessionMachine(
        store=store,
        sessions=sessions,
        allowed_user_ids={ALLOWED_USER, OTHER_ALLOWED_USER},
        delete_flow=DeleteWorkflow(store),
        verification_reader=VerificationReader(tmp_path / "missing.xlsx"),
    )


def insert_raw(store: ReportStore, category: Category, content: str, created_at: str, user_id: int = ALLOWED_USER):
    """Insert a row with an explicit timestamp, bypassing the store."""
    with closing(sqlite3.connect(store.db_path)) as conn, conn:
        conn.execute(
            "INSERT INTO reports (user_id, username, report_type, content, created_at) VALUES (?, ?, ?, ?, ?)",
            (user_id, "tech", category.value, content, created_at),
        )
