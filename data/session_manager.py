"""
Session Manager - Per-user menu state
=====================================
In-memory only; a restart puts everybody back at the main menu.
"""

import logging

from bot.states import IDLE, Idle, SessionState

logger = logging.getLogger(__name__)


class SessionStore:
    """Maps user IDs to their current session state."""

    def __init__(self):
        self._sessions: dict[int, SessionState] = {}

    def get(self, user_id: int) -> SessionState:
        """Get the user's state; users without one are idle."""
        return self._sessions.get(user_id, IDLE)

    def set(self, user_id: int, state: SessionState):
        """Replace the user's state."""
        if isinstance(state, Idle):
            self.clear(user_id)
            return
        self._sessions[user_id] = state
        logger.debug(f"User {user_id} -> {state}")

    def clear(self, user_id: int):
        """Forget the user's state."""
        if self._sessions.pop(user_id, None) is not None:
            logger.debug(f"User {user_id} -> idle")

