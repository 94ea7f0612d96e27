"""
Session State Machine
=====================
Interprets inbound events for one user at a time and decides what to send back.

    idle ── Ввести ──> choosing input category ── category ──> awaiting free text ── text ──> idle
      │ ── Посмотреть ──> choosing view category (category / Все -> listing, stays)
      │ ── Удалить ────> choosing delete category (category / Все -> delete listing, stays)
      └ ── Поверка ────> idle (verification list)

"Назад" and /start always lead back to idle.
"""

import logging
from typing import Collection, Optional

import lang
from lang import _ as t
from errors import AccessDenied, StorageError, ValidationError
from bot.delete_flow import DeleteWorkflow
from bot.events import Command, Event, FreeText, MenuButton, Selection
from bot.keyboards import Button, delete_menu, input_menu, main_menu, remove_keyboard, view_menu
from bot.outbound import MARKDOWN, AnswerCallback, Outbound, SendMessage
from bot.states import (
    IDLE,
    AwaitingFreeText,
    ChoosingDeleteCategory,
    ChoosingInputCategory,
    ChoosingViewCategory,
    SessionState,
)
from data.report_store import Category, ReportStore
from data.session_manager import SessionStore
from services.digest_formatter import format_digest, split_message
from services.verification_reader import VerificationReader

logger = logging.getLogger(__name__)


def parse_entries(text: str) -> list[str]:
    """
    Split submitted text into report lines.

    Raises:
        ValidationError: No non-empty lines
    """
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        raise ValidationError("Submission has no non-empty lines")
    return lines


def saved_message(count: int) -> str:
    noun = lang.plural(count, t("entry_one"), t("entry_few"), t("entry_many"))
    return t("saved", count=count, noun=noun)


class SessionMachine:
    """Per-user menu state machine."""

    def __init__(
        self,
        store: ReportStore,
        sessions: SessionStore,
        allowed_user_ids: Collection[int],
        delete_flow: DeleteWorkflow,
        verification_reader: VerificationReader,
    ):
        self.store = store
        self.sessions = sessions
        self.allowed_user_ids = frozenset(allowed_user_ids)
        self.delete_flow = delete_flow
        self.verification_reader = verification_reader

    # ========================================================================
    # Entry point
    # ========================================================================

    def handle(self, event: Event) -> list[Outbound]:
        """Process one inbound event and return the requests to send."""
        try:
            self.authorize(event.user_id)
        except AccessDenied:
            logger.warning(f"Access denied for user {event.user_id} ({event.display_name})")
            if isinstance(event, Selection):
                return [AnswerCallback(event.callback_id, t("access_denied_short"))]
            return [SendMessage(event.chat_id, t("access_denied", user_id=event.user_id))]

        try:
            if isinstance(event, Selection):
                return self.delete_flow.select(event)
            if isinstance(event, Command):
                return self._on_command(event)
            if isinstance(event, MenuButton):
                return self._on_button(event, self.sessions.get(event.user_id))
            if isinstance(event, FreeText):
                return self._on_text(event, self.sessions.get(event.user_id))
        except StorageError as e:
            logger.error(f"Storage error for user {event.user_id}: {e}")
            if isinstance(event, Selection):
                return [AnswerCallback(event.callback_id, t("storage_error"))]
            state = self.sessions.get(event.user_id)
            return [SendMessage(event.chat_id, t("storage_error"), reply_markup=self._keyboard_for(state))]

        raise TypeError(f"Unsupported event: {event!r}")

    def authorize(self, user_id: int):
        """Raise AccessDenied unless the user is on the allow-list."""
        if user_id not in self.allowed_user_ids:
            raise AccessDenied(user_id)

    # ========================================================================
    # Commands
    # ========================================================================

    def _on_command(self, event: Command) -> list[Outbound]:
        state = self.sessions.get(event.user_id)

        # Report lines may start with "/"; only /start and /help interrupt input
        if isinstance(state, AwaitingFreeText) and event.name not in ("start", "help"):
            text = FreeText(event.user_id, event.chat_id, event.display_name, event.text)
            return self._on_text(text, state)

        if event.name == "start":
            self.sessions.clear(event.user_id)
            logger.info(f"User {event.user_id} ({event.display_name}) started the bot")
            name = event.display_name or str(event.user_id)
            return [SendMessage(event.chat_id, t("greeting", name=name), reply_markup=main_menu())]

        if event.name == "help":
            return [SendMessage(
                event.chat_id,
                t("help_message"),
                reply_markup=self._keyboard_for(state),
                parse_mode=MARKDOWN,
            )]

        return self._unrecognized(event.user_id, event.chat_id, state)

    # ========================================================================
    # Menu buttons
    # ========================================================================

    def _on_button(self, event: MenuButton, state: SessionState) -> list[Outbound]:
        button = event.button
        user_id = event.user_id
        chat_id = event.chat_id

        if button is Button.BACK:
            self.sessions.clear(user_id)
            return [SendMessage(chat_id, t("main_menu"), reply_markup=main_menu())]

        if button is Button.ENTER:
            self.sessions.set(user_id, ChoosingInputCategory())
            return [SendMessage(chat_id, t("choose_input_category"), reply_markup=input_menu())]

        if button is Button.VIEW:
            self.sessions.set(user_id, ChoosingViewCategory())
            return [SendMessage(chat_id, t("choose_view_category"), reply_markup=view_menu())]

        if button is Button.DELETE:
            self.sessions.set(user_id, ChoosingDeleteCategory())
            return [SendMessage(chat_id, t("choose_delete_category"), reply_markup=delete_menu())]

        if button is Button.VERIFICATION:
            self.sessions.clear(user_id)
            return [SendMessage(
                chat_id,
                self.verification_reader.read(),
                reply_markup=main_menu(),
                parse_mode=MARKDOWN,
            )]

        # Category buttons and "All" mean different things per mode
        category = button.category

        if isinstance(state, ChoosingInputCategory) and category is not None:
            self.sessions.set(user_id, AwaitingFreeText(category))
            return [SendMessage(chat_id, t(f"prompt_{category.value}"), reply_markup=remove_keyboard())]

        if isinstance(state, ChoosingViewCategory):
            return self._view(chat_id, category)

        if isinstance(state, ChoosingDeleteCategory):
            return self.delete_flow.listing(chat_id, category)

        return self._unrecognized(user_id, chat_id, state)

    def _view(self, chat_id: int, category: Optional[Category]) -> list[Outbound]:
        """Recent reports of one category, or all of them grouped."""
        reports = self.store.list_recent(category)
        text = format_digest(reports, single_category=category is not None)
        return [
            SendMessage(chat_id, chunk, reply_markup=view_menu(), parse_mode=MARKDOWN)
            for chunk in split_message(text)
        ]

    # ========================================================================
    # Free text
    # ========================================================================

    def _on_text(self, event: FreeText, state: SessionState) -> list[Outbound]:
        if not isinstance(state, AwaitingFreeText):
            return self._unrecognized(event.user_id, event.chat_id, state)

        # The bound category is consumed whatever happens next
        self.sessions.clear(event.user_id)

        try:
            entries = parse_entries(event.text)
        except ValidationError:
            logger.info(f"Empty {state.category.value} submission from user {event.user_id}")
            return [SendMessage(event.chat_id, t("empty_input"), reply_markup=main_menu())]

        count = self.store.save_many(event.user_id, event.display_name, state.category, entries)
        return [SendMessage(event.chat_id, saved_message(count), reply_markup=main_menu())]

    # ========================================================================
    # Helpers
    # ========================================================================

    def _unrecognized(self, user_id: int, chat_id: int, state: SessionState) -> list[Outbound]:
        """Generic hint. Choosers keep their mode, anything else goes back to idle."""
        if not isinstance(state, (ChoosingInputCategory, ChoosingViewCategory, ChoosingDeleteCategory)):
            self.sessions.clear(user_id)
            state = IDLE
        return [SendMessage(chat_id, t("use_menu"), reply_markup=self._keyboard_for(state))]

    @staticmethod
    def _keyboard_for(state: SessionState):
        if isinstance(state, ChoosingInputCategory):
            return input_menu()
        if isinstance(state, ChoosingViewCategory):
            return view_menu()
        if isinstance(state, ChoosingDeleteCategory):
            return delete_menu()
        if isinstance(state, AwaitingFreeText):
            return remove_keyboard()
        return main_menu()
