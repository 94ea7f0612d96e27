#!/usr/bin/env python3
"""
FieldBot - Telegram Bot for Field Equipment Reports
===================================================
Entry point for the application.

Usage:
    python main.py
"""

import logging
from telegram import Update

import config
from bot.app import create_application

# Setup logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
)
logger = logging.getLogger(__name__)

# Suppress httpx logging (contains bot token in URLs)
logging.getLogger("httpx").setLevel(logging.WARNING)


def main():
    """Start the bot."""
    # Validate configuration
    if not config.TELEGRAM_BOT_TOKEN:
        raise ValueError("BOT_TOKEN not set in .env file")
    if not config.ALLOWED_USER_IDS:
        raise ValueError("ALLOWED_USER_IDS not set in .env file")

    # Create and run application
    logger.info("Starting FieldBot...")
    application = create_application()

    allowed = ", ".join(str(user_id) for user_id in sorted(config.ALLOWED_USER_IDS))
    logger.info(f"Bot is running! Allowed users: {allowed}. Press Ctrl+C to stop.")
    application.run_polling(allowed_updates=Update.ALL_TYPES)
    logger.info("Bot stopped")


if __name__ == "__main__":
    main()
