"""
Session state machine: menu transitions, free-text policy, access control.
"""
from unittest.mock import patch

import pytest
from telegram import InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove

from bot.events import Command, FreeText, MenuButton, Selection, parse_text
from bot.keyboards import Button
from bot.machine import parse_entries, saved_message
from bot.outbound import AnswerCallback, SendMessage
from bot.states import (
    IDLE,
    AwaitingFreeText,
    ChoosingDeleteCategory,
    ChoosingInputCategory,
    ChoosingViewCategory,
)
from data.report_store import Category
from errors import StorageError, ValidationError
from lang import _ as t

from conftest import ALLOWED_USER, STRANGER


def press(button, user_id=ALLOWED_USER):
    return MenuButton(user_id, user_id, "ivan", button)


def type_text(text, user_id=ALLOWED_USER):
    return FreeText(user_id, user_id, "ivan", text)


def command(name, user_id=ALLOWED_USER):
    return Command(user_id, user_id, "ivan", name)


def only_message(requests) -> SendMessage:
    assert len(requests) == 1
    assert isinstance(requests[0], SendMessage)
    return requests[0]


def keyboard_labels(markup: ReplyKeyboardMarkup) -> list[str]:
    return [button.text for row in markup.keyboard for button in row]


# ============================================================================
# Free-text parsing
# ============================================================================

def test_parse_entries_trims_and_drops_blank_lines():
    assert parse_entries("  a \n\n b\n   \n") == ["a", "b"]


def test_parse_entries_rejects_blank_text():
    with pytest.raises(ValidationError):
        parse_entries(" \n\t\n ")


@pytest.mark.parametrize("count, expected", [
    (1, "✅ Сохранено: 1 запись"),
    (2, "✅ Сохранено: 2 записи"),
    (4, "✅ Сохранено: 4 записи"),
    (5, "✅ Сохранено: 5 записей"),
    (11, "✅ Сохранено: 11 записей"),
    (21, "✅ Сохранено: 21 запись"),
])
def test_saved_message_pluralizes(count, expected):
    assert saved_message(count) == expected


# ============================================================================
# Start & navigation
# ============================================================================

def test_start_resets_state_and_greets(machine, sessions):
    sessions.set(ALLOWED_USER, AwaitingFreeText(Category.OVERHEAT))

    message = only_message(machine.handle(command("start")))

    assert sessions.get(ALLOWED_USER) == IDLE
    assert message.text == t("greeting", name="ivan")
    assert keyboard_labels(message.reply_markup) == [
        Button.ENTER.label, Button.VIEW.label, Button.DELETE.label, Button.VERIFICATION.label,
    ]


def test_enter_opens_input_chooser(machine, sessions):
    message = only_message(machine.handle(press(Button.ENTER)))

    assert sessions.get(ALLOWED_USER) == ChoosingInputCategory()
    assert Button.BACK.label in keyboard_labels(message.reply_markup)
    assert Button.ALL.label not in keyboard_labels(message.reply_markup)


def test_view_and_delete_open_their_choosers(machine, sessions):
    machine.handle(press(Button.VIEW))
    assert sessions.get(ALLOWED_USER) == ChoosingViewCategory()

    machine.handle(press(Button.DELETE))
    assert sessions.get(ALLOWED_USER) == ChoosingDeleteCategory()


@pytest.mark.parametrize("state", [
    ChoosingInputCategory(),
    ChoosingViewCategory(),
    ChoosingDeleteCategory(),
    AwaitingFreeText(Category.UNCLEAR),
])
def test_back_returns_to_idle(machine, sessions, state):
    sessions.set(ALLOWED_USER, state)

    message = only_message(machine.handle(press(Button.BACK)))

    assert sessions.get(ALLOWED_USER) == IDLE
    assert message.text == t("main_menu")


def test_unrecognized_text_while_idle(machine, sessions):
    message = only_message(machine.handle(type_text("hello?")))

    assert message.text == t("use_menu")
    assert sessions.get(ALLOWED_USER) == IDLE
    assert len(machine.store.list_all()) == 0


def test_unrecognized_text_in_chooser_keeps_mode(machine, sessions):
    sessions.set(ALLOWED_USER, ChoosingInputCategory())

    message = only_message(machine.handle(type_text("hello?")))

    assert message.text == t("use_menu")
    assert sessions.get(ALLOWED_USER) == ChoosingInputCategory()
    assert Button.OVERHEAT.label in keyboard_labels(message.reply_markup)


def test_category_button_while_idle_is_unrecognized(machine, sessions):
    message = only_message(machine.handle(press(Button.OVERHEAT)))

    assert message.text == t("use_menu")
    assert sessions.get(ALLOWED_USER) == IDLE


def test_unknown_command_is_unrecognized(machine):
    assert only_message(machine.handle(command("frobnicate"))).text == t("use_menu")


def test_help_keeps_state(machine, sessions):
    sessions.set(ALLOWED_USER, ChoosingViewCategory())

    message = only_message(machine.handle(command("help")))

    assert message.text == t("help_message")
    assert sessions.get(ALLOWED_USER) == ChoosingViewCategory()


# ============================================================================
# Input flow
# ============================================================================

def test_category_button_binds_category_and_removes_keyboard(machine, sessions):
    machine.handle(press(Button.ENTER))

    message = only_message(machine.handle(press(Button.BREAKDOWN)))

    assert sessions.get(ALLOWED_USER) == AwaitingFreeText(Category.BREAKDOWN)
    assert message.text == t("prompt_breakdown")
    assert isinstance(message.reply_markup, ReplyKeyboardRemove)


def test_multiline_submission_saves_one_report_per_line(machine, sessions, store):
    machine.handle(press(Button.ENTER))
    machine.handle(press(Button.OVERHEAT))

    message = only_message(machine.handle(type_text("Lenina 5 - 85C\nMira 12 - 92C")))

    reports = store.list_all()
    assert sorted(r.content for r in reports) == ["Lenina 5 - 85C", "Mira 12 - 92C"]
    assert all(r.category is Category.OVERHEAT for r in reports)
    assert all(r.user_id == ALLOWED_USER and r.display_name == "ivan" for r in reports)
    assert message.text == "✅ Сохранено: 2 записи"
    assert sessions.get(ALLOWED_USER) == IDLE


def test_blank_submission_saves_nothing(machine, sessions, store):
    sessions.set(ALLOWED_USER, AwaitingFreeText(Category.DEVIATION))

    message = only_message(machine.handle(type_text("  \n \n")))

    assert message.text == t("empty_input")
    assert store.list_all() == []
    assert sessions.get(ALLOWED_USER) == IDLE
    assert isinstance(message.reply_markup, ReplyKeyboardMarkup)


def test_slash_prefixed_lines_are_saved_as_report_text(machine, sessions, store):
    sessions.set(ALLOWED_USER, AwaitingFreeText(Category.BREAKDOWN))
    event = parse_text(ALLOWED_USER, ALLOWED_USER, "ivan", "/3 Lenina 5 - leak\nMira 12 - valve")
    assert isinstance(event, Command)

    message = only_message(machine.handle(event))

    reports = store.list_all()
    assert sorted(r.content for r in reports) == ["/3 Lenina 5 - leak", "Mira 12 - valve"]
    assert all(r.category is Category.BREAKDOWN for r in reports)
    assert message.text == "✅ Сохранено: 2 записи"
    assert sessions.get(ALLOWED_USER) == IDLE


def test_start_still_interrupts_text_input(machine, sessions, store):
    sessions.set(ALLOWED_USER, AwaitingFreeText(Category.BREAKDOWN))

    machine.handle(parse_text(ALLOWED_USER, ALLOWED_USER, "ivan", "/start"))

    assert store.list_all() == []
    assert sessions.get(ALLOWED_USER) == IDLE


def test_help_keeps_bound_category(machine, sessions, store):
    sessions.set(ALLOWED_USER, AwaitingFreeText(Category.BREAKDOWN))

    message = only_message(machine.handle(command("help")))

    assert message.text == t("help_message")
    assert store.list_all() == []
    assert sessions.get(ALLOWED_USER) == AwaitingFreeText(Category.BREAKDOWN)


def test_storage_failure_is_reported_and_clears_category(machine, sessions):
    sessions.set(ALLOWED_USER, AwaitingFreeText(Category.OVERHEAT))

    with patch.object(machine.store, "save_many", side_effect=StorageError("disk gone")):
        message = only_message(machine.handle(type_text("Lenina 5 - 85C")))

    assert message.text == t("storage_error")
    assert sessions.get(ALLOWED_USER) == IDLE


def test_users_do_not_share_state(machine, sessions):
    machine.handle(press(Button.ENTER, user_id=ALLOWED_USER))
    assert sessions.get(3) == IDLE


# ============================================================================
# View flow
# ============================================================================

def test_view_category_shows_recent_reports(machine, sessions, store):
    store.save(ALLOWED_USER, "ivan", Category.OVERHEAT, "hot")
    store.save(ALLOWED_USER, "ivan", Category.BREAKDOWN, "broken")
    machine.handle(press(Button.VIEW))

    message = only_message(machine.handle(press(Button.OVERHEAT)))

    assert "hot" in message.text and "broken" not in message.text
    assert message.parse_mode == "Markdown"
    assert sessions.get(ALLOWED_USER) == ChoosingViewCategory()


def test_view_all_groups_categories(machine, store):
    store.save(ALLOWED_USER, "ivan", Category.OVERHEAT, "hot")
    store.save(ALLOWED_USER, "ivan", Category.BREAKDOWN, "broken")
    machine.handle(press(Button.VIEW))

    message = only_message(machine.handle(press(Button.ALL)))

    assert message.text.startswith(t("digest_title"))
    assert "hot" in message.text and "broken" in message.text


def test_view_empty(machine):
    machine.handle(press(Button.VIEW))
    assert only_message(machine.handle(press(Button.ALL))).text == t("digest_empty")


# ============================================================================
# Delete flow entry & verification
# ============================================================================

def test_delete_category_lists_reports_inline(machine, sessions, store):
    store.save(ALLOWED_USER, "ivan", Category.UNCLEAR, "odd noise")
    machine.handle(press(Button.DELETE))

    message = only_message(machine.handle(press(Button.UNCLEAR)))

    assert isinstance(message.reply_markup, InlineKeyboardMarkup)
    assert sessions.get(ALLOWED_USER) == ChoosingDeleteCategory()


def test_verification_button_returns_to_idle(machine, sessions):
    sessions.set(ALLOWED_USER, ChoosingViewCategory())

    message = only_message(machine.handle(press(Button.VERIFICATION)))

    assert message.text == t("verification_file_missing")
    assert sessions.get(ALLOWED_USER) == IDLE


# ============================================================================
# Access control
# ============================================================================

@pytest.mark.parametrize("event", [
    command("start", user_id=STRANGER),
    press(Button.ENTER, user_id=STRANGER),
    type_text("Lenina 5 - 85C", user_id=STRANGER),
])
def test_stranger_is_denied_without_state_change(machine, sessions, store, event):
    sessions.set(STRANGER, AwaitingFreeText(Category.OVERHEAT))

    message = only_message(machine.handle(event))

    assert message.text == t("access_denied", user_id=STRANGER)
    assert sessions.get(STRANGER) == AwaitingFreeText(Category.OVERHEAT)
    assert store.list_all() == []


def test_stranger_selection_is_denied(machine, store):
    store.save(ALLOWED_USER, "ivan", Category.OVERHEAT, "hot")
    report_id = store.list_all()[0].id

    requests = machine.handle(Selection(STRANGER, STRANGER, "eve", f"delete_{report_id}", "cb1", 10))

    assert requests == [AnswerCallback("cb1", t("access_denied_short"))]
    assert store.find(report_id) is not None
