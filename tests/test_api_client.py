"""
Tests for the API Client

Tests cover URL building, query parameters, response decoding and the
mapping of HTTP status codes to exceptions.
"""

import pytest
from unittest.mock import MagicMock
import sys
import os

import requests

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.api_client import ApiClient, parse_list, parse_one
from utils.exceptions import (
    ApiError, ApiConnectionError, BadRequestError, ForbiddenError,
    NotFoundError, ServerError, ResponseParseError, CampusFeedError
)


class TestRequest:
    """Tests for ApiClient.request."""

    def test_builds_url_and_sends_json(self, api_client, mock_session, mock_http_response):
        mock_session.request.return_value = mock_http_response(status_code=201, json_data={'id': 7})

        result = api_client.post('/events', params={'userId': 'device_x'}, json_body={'title': 'T'})

        assert result == {'id': 7}
        mock_session.request.assert_called_once_with(
            'POST',
            'http://test-backend/api/events',
            params={'userId': 'device_x'},
            json={'title': 'T'},
            timeout=5
        )

    def test_drops_none_params(self, api_client, mock_session, mock_http_response):
        mock_session.request.return_value = mock_http_response(json_data=[])

        api_client.get('events/search', params={'keyword': 'ai', 'userId': None})

        args, kwargs = mock_session.request.call_args
        assert args[1] == 'http://test-backend/api/events/search'
        assert kwargs['params'] == {'keyword': 'ai'}

    def test_no_params_sends_none(self, api_client, mock_session, mock_http_response):
        mock_session.request.return_value = mock_http_response(json_data=[])

        api_client.get('/events')

        assert mock_session.request.call_args.kwargs['params'] is None

    def test_204_returns_none(self, api_client, mock_session, mock_http_response):
        mock_session.request.return_value = mock_http_response(status_code=204)

        assert api_client.delete('/events/1') is None

    def test_plain_text_body_returned_as_text(self, api_client, mock_session, mock_http_response):
        mock_session.request.return_value = mock_http_response(text="Events API is running")

        assert api_client.get('/events/health') == "Events API is running"

    def test_sets_json_headers_on_session(self, mock_session):
        ApiClient(base_url="http://x/api/", session=mock_session)
        assert mock_session.headers['Content-Type'] == 'application/json'

    def test_strips_trailing_slash(self, mock_session):
        client = ApiClient(base_url="http://x/api/", session=mock_session)
        assert client.build_url('/events') == "http://x/api/events"


class TestStatusMapping:
    """Non-2xx statuses raise a status-specific ApiError."""

    @pytest.mark.parametrize("status, error_cls", [
        (400, BadRequestError),
        (403, ForbiddenError),
        (404, NotFoundError),
        (500, ServerError),
        (503, ServerError),
        (409, ApiError),
    ])
    def test_status_raises(self, api_client, mock_session, mock_http_response, status, error_cls):
        mock_session.request.return_value = mock_http_response(status_code=status, text="nope")

        with pytest.raises(error_cls) as exc_info:
            api_client.get('/events/1')

        assert exc_info.value.status_code == status
        assert str(exc_info.value) == f"HTTP error! status: {status}"
        assert isinstance(exc_info.value, CampusFeedError)

    def test_failure_is_logged(self, api_client, mock_session, mock_http_response, capture_logs):
        mock_session.request.return_value = mock_http_response(status_code=404)

        with pytest.raises(NotFoundError):
            api_client.get('/events/99')

        assert any("API call failed" in record.getMessage() for record in capture_logs)

    def test_connection_error(self, api_client, mock_session):
        mock_session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ApiConnectionError) as exc_info:
            api_client.get('/events')

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_timeout_is_connection_error(self, api_client, mock_session):
        mock_session.request.side_effect = requests.Timeout("slow")

        with pytest.raises(ApiConnectionError):
            api_client.get('/events')


class TestParsing:
    """Tests for parse_list and parse_one."""

    def test_parse_list_none_is_empty(self):
        assert parse_list(None, dict, "things") == []

    def test_parse_list_rejects_object(self):
        with pytest.raises(ResponseParseError):
            parse_list({'id': 1}, dict, "things")

    def test_parse_list_applies_factory(self):
        factory = MagicMock(side_effect=lambda d: d['id'])
        assert parse_list([{'id': 1}, {'id': 2}], factory, "things") == [1, 2]

    def test_parse_list_wraps_factory_errors(self):
        with pytest.raises(ResponseParseError):
            parse_list(["not a dict"], lambda d: d.get('id'), "things")

    def test_parse_one_rejects_text(self):
        with pytest.raises(ResponseParseError):
            parse_one("Events API is running", dict, "event")
