"""
Conversation States
===================
Where a user is in the menu flow. Only AwaitingFreeText carries a payload.
"""

from dataclasses import dataclass
from typing import Union

from data.report_store import Category


@dataclass(frozen=True)
class Idle:
    """Top-level menu, no interaction in progress."""


@dataclass(frozen=True)
class ChoosingInputCategory:
    """Picking which kind of report to enter."""


@dataclass(frozen=True)
class ChoosingViewCategory:
    """Picking which reports to look at."""


@dataclass(frozen=True)
class ChoosingDeleteCategory:
    """Picking which reports to list for deletion."""


@dataclass(frozen=True)
class AwaitingFreeText:
    """Waiting for the report lines of a chosen category."""
    category: Category


SessionState = Union[
    Idle,
    ChoosingInputCategory,
    ChoosingViewCategory,
    ChoosingDeleteCategory,
    AwaitingFreeText,
]

IDLE = Idle()
