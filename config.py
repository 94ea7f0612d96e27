"""
Configuration settings for FieldBot
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

# Base directory
BASE_DIR = Path(__file__).parent


def parse_user_ids(raw: str) -> frozenset[int]:
    """Parse a comma-separated list of Telegram user IDs, skipping junk."""
    user_ids = set()
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            user_ids.add(int(part))
        except ValueError:
            logger.warning(f"Ignoring invalid user ID in ALLOWED_USER_IDS: {part!r}")
    return frozenset(user_ids)


# Telegram settings
TELEGRAM_BOT_TOKEN = os.getenv("BOT_TOKEN")
ALLOWED_USER_IDS = parse_user_ids(os.getenv("ALLOWED_USER_IDS", ""))

# Time settings
TIMEZONE = os.getenv("TIMEZONE", "Europe/Moscow")
RECENT_WINDOW_HOURS = 24

# Storage
STORAGE_DIR = Path(os.getenv("STORAGE_DIR", str(BASE_DIR / "storage")))
DB_PATH = Path(os.getenv("DB_PATH", str(STORAGE_DIR / "reports.db")))

# Digest: minute hour day-of-month month day-of-week
DIGEST_CRON = os.getenv("DIGEST_CRON", "0 9 * * 1-5")

# Device verification spreadsheet
VERIFICATION_FILE = Path(os.getenv("VERIFICATION_FILE", str(STORAGE_DIR / "devices.xlsx")))
VERIFICATION_NAME_COLUMNS = (0, 1)  # A + B
VERIFICATION_DATE_COLUMN = 5  # F
VERIFICATION_HORIZON_MONTHS = 3

# Delete workflow
DELETE_PREVIEW_LENGTH = 30
DELETE_LIST_LIMIT = 50

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
