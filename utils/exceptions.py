"""
Custom Exception Classes for the Campus Feed Client

This module defines custom exceptions for better error handling and
categorization of failures across the application.
"""

from typing import Optional


class CampusFeedError(Exception):
    """Base exception for all Campus Feed client errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(CampusFeedError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# Input Errors
# =============================================================================

class ValidationError(CampusFeedError):
    """Raised when user input (form fields, comment text, reaction names) is rejected before sending."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or [message]


# =============================================================================
# Local Storage Errors
# =============================================================================

class StorageError(CampusFeedError):
    """Base exception for local storage errors."""
    pass


class DeviceIdError(StorageError):
    """Raised when the device identifier cannot be read or written."""
    pass


# =============================================================================
# API Errors
# =============================================================================

class ApiError(CampusFeedError):
    """Base exception for errors talking to the feed backend."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 method: Optional[str] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.method = method
        self.url = url


class ApiConnectionError(ApiError):
    """Raised when the backend cannot be reached (DNS, refused connection, timeout)."""
    pass


class BadRequestError(ApiError):
    """Raised on HTTP 400, e.g. an unknown post type or reaction value."""
    pass


class ForbiddenError(ApiError):
    """Raised on HTTP 403, e.g. editing or deleting someone else's post."""
    pass


class NotFoundError(ApiError):
    """Raised on HTTP 404."""
    pass


class ServerError(ApiError):
    """Raised on HTTP 5xx."""
    pass


class ResponseParseError(ApiError):
    """Raised when a response body cannot be turned into the expected record."""
    pass
