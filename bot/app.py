"""
Bot Application
===============
Creates and configures the Telegram bot application.
"""

import logging
from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    MessageHandler,
    CallbackQueryHandler,
    ContextTypes,
    filters,
)

import config
from bot.delete_flow import DeleteWorkflow, TOKEN_PREFIX
from bot.machine import SessionMachine
from bot.handlers import (
    start_command,
    help_command,
    text_message_handler,
    delete_callback_handler,
)
from bot.handlers.common import MACHINE_KEY
from data.report_store import ReportStore, report_store
from data.session_manager import SessionStore
from services.digest_scheduler import DigestScheduler
from services.verification_reader import VerificationReader, verification_reader

logger = logging.getLogger(__name__)

# Edited messages are not new input
NEW_MESSAGES = filters.UpdateType.MESSAGE
MESSAGE_TEXT = filters.TEXT & NEW_MESSAGES


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    """Log errors raised while handling an update."""
    logger.error(f"Error while handling update {update}: {context.error}", exc_info=context.error)


def build_machine(
    store: ReportStore,
    allowed_user_ids,
    reader: VerificationReader,
) -> SessionMachine:
    """Wire the session machine and its collaborators."""
    return SessionMachine(
        store=store,
        sessions=SessionStore(),
        allowed_user_ids=allowed_user_ids,
        delete_flow=DeleteWorkflow(store),
        verification_reader=reader,
    )


def create_application() -> Application:
    """Create and configure the bot application."""

    report_store.initialize()

    application = Application.builder().token(config.TELEGRAM_BOT_TOKEN).build()
    application.bot_data[MACHINE_KEY] = build_machine(
        report_store,
        config.ALLOWED_USER_IDS,
        verification_reader,
    )

    # ========================================================================
    # Register Handlers
    # ========================================================================

    # Basic commands
    application.add_handler(CommandHandler("start", start_command, filters=NEW_MESSAGES))
    application.add_handler(CommandHandler("help", help_command, filters=NEW_MESSAGES))

    # Delete selections
    application.add_handler(CallbackQueryHandler(delete_callback_handler, pattern=f"^{TOKEN_PREFIX}"))

    # Buttons, report lines and anything else typed
    application.add_handler(MessageHandler(MESSAGE_TEXT, text_message_handler))

    application.add_error_handler(error_handler)

    # ========================================================================
    # Scheduled digest
    # ========================================================================

    digest = DigestScheduler(report_store, config.ALLOWED_USER_IDS)
    digest.schedule(application.job_queue, config.DIGEST_CRON, config.TIMEZONE)

    logger.info("Application configured with all handlers")

    return application
