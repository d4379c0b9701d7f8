"""
Shared Test Fixtures for the Campus Feed Client

This module provides common fixtures used across all test modules.
Fixtures include a settings mock, HTTP response and session mocks, an
in-memory device id store, and factories for backend JSON records.
"""

import pytest
from unittest.mock import MagicMock, patch
from typing import Optional, Dict, Any
import json
import logging
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

DEVICE_ID = "device_1700000000000_abc123xyz"


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def mock_settings():
    """
    Mock the settings module with test configuration values.

    Usage:
        def test_something(mock_settings):
            mock_settings.API_TIMEOUT = 3
            # ... test code

    Returns:
        MagicMock: A mock settings object with default test values.
    """
    with patch('config.settings') as mock_settings_module:
        # Backend
        mock_settings_module.API_BASE_URL = "http://test-backend/api"
        mock_settings_module.API_TIMEOUT = 5

        # Identity
        mock_settings_module.DEVICE_ID_FILE = "/tmp/test_campus_feed_device_id"
        mock_settings_module.DEVICE_ID_PREFIX = "device_"
        mock_settings_module.DEFAULT_DEVICE_ID = "device_default"

        # Feed and display
        mock_settings_module.FEED_FILTERS = ["all", "events", "lost_found", "announcements", "my_posts"]
        mock_settings_module.DEFAULT_FEED_FILTER = "all"
        mock_settings_module.RECENT_DAYS = 7
        mock_settings_module.DESCRIPTION_TRUNCATE_LENGTH = 200
        mock_settings_module.TOP_REACTIONS_LIMIT = 3
        mock_settings_module.CARD_WIDTH = 72
        mock_settings_module.USE_COLOR = False

        # Logging
        mock_settings_module.LOG_FILE = None
        mock_settings_module.LOG_LEVEL = "INFO"

        yield mock_settings_module


@pytest.fixture
def no_color():
    """Render views without ANSI codes so assertions can match plain text."""
    with patch('config.settings.USE_COLOR', False):
        yield


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def capture_logs():
    """
    Capture log records from the application's logger hierarchy.

    Returns:
        list: A list that will contain captured log records.
    """
    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)

    app_logger = logging.getLogger("campus_feed")
    original_level = app_logger.level
    app_logger.setLevel(logging.DEBUG)
    app_logger.addHandler(handler)

    yield handler.records

    app_logger.removeHandler(handler)
    app_logger.setLevel(original_level)


# =============================================================================
# HTTP Fixtures
# =============================================================================

@pytest.fixture
def mock_http_response():
    """
    Factory fixture for creating mock HTTP responses.

    Usage:
        def test_http_request(mock_http_response):
            response = mock_http_response(status_code=200, json_data={'key': 'value'})

    Returns:
        callable: A factory function for creating mock responses.
    """
    def _create_response(
        status_code: int = 200,
        json_data: Any = None,
        text: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> MagicMock:
        mock_response = MagicMock()
        mock_response.status_code = status_code
        mock_response.headers = headers or {'Content-Type': 'application/json'}
        mock_response.ok = 200 <= status_code < 300

        if text is not None:
            mock_response.text = text
        elif json_data is not None:
            mock_response.text = json.dumps(json_data)
        else:
            mock_response.text = ''

        if json_data is not None:
            mock_response.json.return_value = json_data
        else:
            mock_response.json.side_effect = ValueError("No JSON data")

        return mock_response

    return _create_response


@pytest.fixture
def mock_session(mock_http_response):
    """
    A mock requests.Session whose request() returns an empty 200 by default.

    Usage:
        def test_call(mock_session, mock_http_response):
            mock_session.request.return_value = mock_http_response(json_data=[...])
    """
    session = MagicMock()
    session.headers = {}
    session.request.return_value = mock_http_response(status_code=200)
    return session


@pytest.fixture
def api_client(mock_session):
    """An ApiClient wired to the mock session."""
    from services.api_client import ApiClient
    return ApiClient(base_url="http://test-backend/api", timeout=5, session=mock_session)


@pytest.fixture
def mock_client():
    """A bare MagicMock standing in for ApiClient in service tests."""
    return MagicMock()


# =============================================================================
# Device Id Fixtures
# =============================================================================

class MemoryDeviceIdStorage:
    """In-memory DeviceIdStorage used by tests."""

    def __init__(self, value: Optional[str] = None):
        self.value = value
        self.saves = 0

    def load(self) -> Optional[str]:
        return self.value

    def save(self, device_id: str) -> None:
        self.saves += 1
        self.value = device_id


@pytest.fixture
def memory_storage():
    return MemoryDeviceIdStorage()


@pytest.fixture
def device():
    """A DeviceIdStore that always answers with DEVICE_ID."""
    from data.device import DeviceIdStore
    return DeviceIdStore(MemoryDeviceIdStorage(DEVICE_ID))


# =============================================================================
# Record Factories
# =============================================================================

@pytest.fixture
def event_json():
    """
    Factory fixture for backend event JSON.

    Usage:
        def test_event(event_json):
            data = event_json(id=3, createdAt="2025-03-05T14:30:00")
    """
    def _create(**overrides) -> Dict[str, Any]:
        data = {
            'id': 1,
            'title': 'AI Workshop',
            'description': 'Hands-on session on transformers.',
            'location': 'CSE Lab',
            'eventDate': '2025-03-10T15:00:00',
            'imageUrl': None,
            'createdBy': DEVICE_ID,
            'createdAt': '2025-03-05T14:30:00',
            'goingCount': 4,
            'interestedCount': 2,
            'notGoingCount': 1,
            'userResponse': None,
        }
        data.update(overrides)
        return data
    return _create


@pytest.fixture
def lost_found_json():
    """Factory fixture for backend lost & found item JSON."""
    def _create(**overrides) -> Dict[str, Any]:
        data = {
            'id': 1,
            'itemName': 'Blue wallet',
            'description': 'Leather wallet with student ID.',
            'type': 'LOST',
            'location': 'Library',
            'incidentDate': '2025-03-04T09:00:00',
            'contactInfo': 'ext 4411',
            'createdBy': 'device_1699999999999_zzzzzzzzz',
            'createdAt': '2025-03-04T10:00:00',
            'isResolved': False,
        }
        data.update(overrides)
        return data
    return _create


@pytest.fixture
def announcement_json():
    """Factory fixture for backend announcement JSON."""
    def _create(**overrides) -> Dict[str, Any]:
        data = {
            'id': 1,
            'title': 'Mid-sem schedule',
            'content': 'The mid-semester exams start on Monday.',
            'department': 'Academics',
            'type': 'EXAM',
            'priority': 'HIGH',
            'createdBy': 'admin',
            'createdAt': '2025-03-03T08:00:00',
            'expiryDate': None,
            'isActive': True,
            'isPinned': False,
            'isExpired': False,
        }
        data.update(overrides)
        return data
    return _create


@pytest.fixture
def comment_json():
    """Factory fixture for backend comment JSON."""
    def _create(**overrides) -> Dict[str, Any]:
        data = {
            'id': 1,
            'content': 'See you there!',
            'createdBy': DEVICE_ID,
            'createdAt': '2025-03-05T15:00:00',
            'postId': 1,
            'postType': 'EVENT',
            'parentId': None,
            'replies': [],
            'isToxic': False,
            'toxicityScore': 0.01,
        }
        data.update(overrides)
        return data
    return _create
