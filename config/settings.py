"""
Configuration Settings for the Campus Feed Client

This module centralizes all configuration settings for the Campus Feed client,
including environment variables, backend location, and display constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Determine the application root directory
APP_ROOT = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(dotenv_path=os.path.join(APP_ROOT, '.env'))


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        # validate_settings() reports the bad value
        return -1


# =============================================================================
# Backend Settings
# =============================================================================

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8080/api").rstrip("/")
API_TIMEOUT = _env_int("API_TIMEOUT", 10)        # Seconds per request

# =============================================================================
# Identity Settings
# =============================================================================

# Where the pseudo-anonymous device identifier is kept between runs
DEVICE_ID_FILE = os.getenv(
    "DEVICE_ID_FILE",
    os.path.join(str(Path.home()), ".campus_feed", "device_id")
)
DEVICE_ID_PREFIX = "device_"
DEFAULT_DEVICE_ID = "device_default"   # Used when no storage is available

# =============================================================================
# Feed Settings
# =============================================================================

FEED_FILTERS = ["all", "events", "lost_found", "announcements", "my_posts"]
DEFAULT_FEED_FILTER = os.getenv("DEFAULT_FEED_FILTER", "all")
RECENT_DAYS = 7                      # Window the backend uses for /recent endpoints

# =============================================================================
# Display Settings
# =============================================================================

DESCRIPTION_TRUNCATE_LENGTH = 200    # Characters of body text shown per feed card
TOP_REACTIONS_LIMIT = 3              # Reaction types shown next to the total
CARD_WIDTH = 72                      # Width of rendered cards
USE_COLOR = _env_bool("USE_COLOR", True)

# =============================================================================
# Logging Settings
# =============================================================================

LOG_FILE = os.getenv("LOG_FILE", "campus_feed.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
