"""
API Client Module

This module wraps the campus feed REST backend. Every resource service goes
through ``ApiClient.request`` so that URL building, JSON handling, status-code
mapping and error logging live in one place.
"""

from typing import Optional, Dict, Any

import requests

from config import settings
from utils.exceptions import (
    ApiError, ApiConnectionError, BadRequestError, ForbiddenError,
    NotFoundError, ServerError, ResponseParseError
)
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_HEADERS = {
    'Content-Type': 'application/json',
    'Accept': 'application/json, text/plain;q=0.9',
}

_STATUS_ERRORS = {
    400: BadRequestError,
    403: ForbiddenError,
    404: NotFoundError,
}


class ApiClient:
    """Thin JSON-over-HTTP client for the feed backend."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the API client.

        Args:
            base_url: Backend base URL including the ``/api`` prefix.
            timeout: Per-request timeout in seconds.
            session: Optional pre-built session (tests inject a mock here).
        """
        self.base_url = (base_url or settings.API_BASE_URL).rstrip('/')
        self.timeout = timeout or settings.API_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)

    def build_url(self, endpoint: str) -> str:
        if not endpoint.startswith('/'):
            endpoint = '/' + endpoint
        return f"{self.base_url}{endpoint}"

    def request(self, method: str, endpoint: str, params: Optional[Dict[str, Any]] = None,
                json_body: Optional[Any] = None) -> Any:
        """
        Send a request and decode the response.

        Args:
            method: HTTP method.
            endpoint: Path below the base URL, e.g. ``/events/3``.
            params: Query-string parameters; entries whose value is None are dropped.
            json_body: Body to send as JSON.

        Returns:
            The decoded JSON body, the raw text for non-JSON bodies, or None for empty responses.

        Raises:
            ApiConnectionError: If the backend could not be reached.
            ApiError: A status-specific subclass for any non-2xx response.
        """
        url = self.build_url(endpoint)
        query = {key: value for key, value in (params or {}).items() if value is not None}

        try:
            response = self.session.request(
                method,
                url,
                params=query or None,
                json=json_body,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"API call failed: {method} {url}: {e}")
            raise ApiConnectionError(f"Could not reach {url}: {e}", method=method, url=url) from e

        if not 200 <= response.status_code < 300:
            error_cls = _STATUS_ERRORS.get(response.status_code)
            if error_cls is None:
                error_cls = ServerError if response.status_code >= 500 else ApiError
            logger.error(f"API call failed: {method} {url} -> HTTP {response.status_code}")
            raise error_cls(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
                method=method,
                url=url
            )

        if response.status_code == 204 or not response.text:
            return None

        try:
            return response.json()
        except ValueError:
            # Health endpoints answer with plain text
            return response.text

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request('GET', endpoint, params=params)

    def post(self, endpoint: str, params: Optional[Dict[str, Any]] = None,
             json_body: Optional[Any] = None) -> Any:
        return self.request('POST', endpoint, params=params, json_body=json_body)

    def put(self, endpoint: str, params: Optional[Dict[str, Any]] = None,
            json_body: Optional[Any] = None) -> Any:
        return self.request('PUT', endpoint, params=params, json_body=json_body)

    def delete(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request('DELETE', endpoint, params=params)

    def close(self) -> None:
        self.session.close()


def parse_list(data: Any, factory, what: str) -> list:
    """
    Turn a JSON array into a list of records.

    Args:
        data: The decoded response body.
        factory: Callable building one record from a dict (usually ``Model.from_dict``).
        what: Name of the resource, used in error messages.

    Raises:
        ResponseParseError: If the body is not a list of objects.
    """
    if data is None:
        return []
    if not isinstance(data, list):
        raise ResponseParseError(f"Expected a list of {what}, got {type(data).__name__}")
    try:
        return [factory(entry) for entry in data]
    except (AttributeError, TypeError, ValueError) as e:
        raise ResponseParseError(f"Malformed {what} in response: {e}") from e


def parse_one(data: Any, factory, what: str):
    """Turn a JSON object into a record, raising ResponseParseError on anything else."""
    if not isinstance(data, dict):
        raise ResponseParseError(f"Expected a {what} object, got {type(data).__name__}")
    try:
        return factory(data)
    except (AttributeError, TypeError, ValueError) as e:
        raise ResponseParseError(f"Malformed {what} in response: {e}") from e
