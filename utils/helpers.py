"""
Helper Utility Module

This module provides various helper functions used throughout the Campus Feed client:
timestamp parsing and formatting, text truncation, and small data accessors.
"""

import os
from typing import Optional, Union
from datetime import datetime
from urllib.parse import urlparse

from config import settings


def is_valid_url(url: str) -> bool:
    """
    Check if a URL is valid.

    Args:
        url: The URL to validate

    Returns:
        bool: True if the URL is valid, False otherwise
    """
    try:
        result = urlparse(url)
        return all([result.scheme, result.netloc])
    except Exception:
        return False


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse a backend timestamp.

    The backend writes local date-times as ``yyyy-MM-ddTHH:mm[:ss][.SSS]``.
    A trailing ``Z`` or UTC offset is accepted and dropped so that every
    parsed value is naive and comparable.

    Args:
        value: The raw value from the JSON body.

    Returns:
        Optional[datetime]: The parsed timestamp, or None if missing or unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1]
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime in the backend's format (minutes precision, seconds when present)."""
    if value is None:
        return None
    if value.second or value.microsecond:
        return value.strftime('%Y-%m-%dT%H:%M:%S')
    return value.strftime('%Y-%m-%dT%H:%M')


def format_date(value: Optional[datetime]) -> str:
    """
    Format a timestamp for display, e.g. ``Mar 5, 2025, 02:30 PM``.

    Args:
        value: The timestamp to format

    Returns:
        str: The formatted date, or an empty string when value is None
    """
    if value is None:
        return ""
    return f"{value.strftime('%b')} {value.day}, {value.year}, {value.strftime('%I:%M %p')}"


def format_relative_time(value: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Format a timestamp relative to now.

    Args:
        value: The timestamp to describe
        now: Reference time (defaults to datetime.now())

    Returns:
        str: "just now", "5m ago", "3h ago", "2d ago", or the full date after a week
    """
    if value is None:
        return ""
    now = now or datetime.now()
    diff_in_seconds = int((now - value).total_seconds())

    if diff_in_seconds < 60:
        return "just now"
    elif diff_in_seconds < 3600:
        return f"{diff_in_seconds // 60}m ago"
    elif diff_in_seconds < 86400:
        return f"{diff_in_seconds // 3600}h ago"
    elif diff_in_seconds < 604800:
        return f"{diff_in_seconds // 86400}d ago"
    return format_date(value)


def truncate_text(text: str, max_length: int = 100, add_ellipsis: bool = True) -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: The text to truncate
        max_length: Maximum length
        add_ellipsis: Whether to add an ellipsis if text is truncated

    Returns:
        str: Truncated text
    """
    if not text or len(text) <= max_length:
        return text

    truncated = text[:max_length]
    if add_ellipsis:
        truncated += "..."

    return truncated


def display_author(created_by: Optional[str]) -> str:
    """
    Turn a creator id into something readable.

    Device identifiers are shortened to ``User <last 4 chars>``; anything else
    is shown unchanged.
    """
    if not created_by:
        return "Anonymous"
    if created_by.startswith(settings.DEVICE_ID_PREFIX):
        return f"User {created_by[-4:]}"
    return created_by


def ensure_dir_exists(directory: str) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        directory: The directory path to check/create
    """
    if directory and not os.path.exists(directory):
        os.makedirs(directory)
