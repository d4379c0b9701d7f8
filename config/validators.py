"""
Configuration Validation for the Campus Feed Client

This module contains configuration validation logic and a loggable
configuration summary.
"""

from utils.exceptions import ConfigurationError
from utils.helpers import is_valid_url

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def validate_settings():
    """
    Validate that all required settings are properly configured.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    # Import settings here to avoid circular imports
    from config import settings

    errors = []

    if not settings.API_BASE_URL:
        errors.append("Missing required environment variable: API_BASE_URL")
    elif not is_valid_url(settings.API_BASE_URL):
        errors.append(f"API_BASE_URL is not a valid URL: {settings.API_BASE_URL}")

    # Validate numeric settings are within reasonable bounds
    numeric_validations = [
        ("API_TIMEOUT", settings.API_TIMEOUT, 1, 300),
        ("DESCRIPTION_TRUNCATE_LENGTH", settings.DESCRIPTION_TRUNCATE_LENGTH, 10, 5000),
        ("TOP_REACTIONS_LIMIT", settings.TOP_REACTIONS_LIMIT, 1, 6),
        ("CARD_WIDTH", settings.CARD_WIDTH, 40, 200),
    ]

    for name, value, min_val, max_val in numeric_validations:
        if value < min_val or value > max_val:
            errors.append(f"{name} must be between {min_val} and {max_val}, got {value}")

    if settings.DEFAULT_FEED_FILTER not in settings.FEED_FILTERS:
        errors.append(f"DEFAULT_FEED_FILTER must be one of {', '.join(settings.FEED_FILTERS)}, "
                      f"got {settings.DEFAULT_FEED_FILTER}")

    if settings.LOG_LEVEL not in VALID_LOG_LEVELS:
        errors.append(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}, got {settings.LOG_LEVEL}")

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True


def get_config_summary() -> dict:
    """
    Returns a summary of current configuration.
    Useful for logging startup state.
    """
    # Import settings here to avoid circular imports
    from config import settings

    return {
        "backend": {
            "base_url": settings.API_BASE_URL,
            "timeout": settings.API_TIMEOUT,
        },
        "identity": {
            "device_id_file": settings.DEVICE_ID_FILE,
        },
        "feed": {
            "default_filter": settings.DEFAULT_FEED_FILTER,
            "recent_days": settings.RECENT_DAYS,
        },
        "display": {
            "truncate_length": settings.DESCRIPTION_TRUNCATE_LENGTH,
            "top_reactions": settings.TOP_REACTIONS_LIMIT,
            "color": settings.USE_COLOR,
        },
    }
