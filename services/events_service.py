"""
Events Service Module

This module handles the ``/events`` endpoints: listing, creating and editing
events, recording the device's attendance response, and event statistics.
"""

from typing import Optional, List, Dict, Any
from urllib.parse import quote

from data.device import DeviceIdStore
from data.models import Event, EventResponse, EventStats
from services.api_client import ApiClient, parse_list, parse_one
from utils.exceptions import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class EventsService:
    """Service for campus events."""

    resource = "/events"

    def __init__(self, client: ApiClient, device: DeviceIdStore):
        self.client = client
        self.device = device

    @property
    def user_id(self) -> str:
        return self.device.get_device_id()

    def get_all(self) -> List[Event]:
        """Fetch every event, newest first, with this device's response filled in."""
        data = self.client.get(self.resource, params={'userId': self.user_id})
        return parse_list(data, Event.from_dict, "events")

    def get_by_id(self, event_id: int) -> Event:
        data = self.client.get(f"{self.resource}/{event_id}", params={'userId': self.user_id})
        return parse_one(data, Event.from_dict, "event")

    def create(self, payload: Dict[str, Any]) -> Event:
        """
        Create an event owned by this device.

        Args:
            payload: camelCase event fields (title, description, location, eventDate, imageUrl).

        Returns:
            Event: The event as stored by the backend.
        """
        data = self.client.post(self.resource, params={'userId': self.user_id}, json_body=payload)
        event = parse_one(data, Event.from_dict, "event")
        logger.info(f"Created event {event.id}: {event.title}")
        return event

    def update(self, event_id: int, payload: Dict[str, Any]) -> Event:
        data = self.client.put(f"{self.resource}/{event_id}", params={'userId': self.user_id},
                               json_body=payload)
        return parse_one(data, Event.from_dict, "event")

    def delete(self, event_id: int) -> None:
        self.client.delete(f"{self.resource}/{event_id}", params={'userId': self.user_id})
        logger.info(f"Deleted event {event_id}")

    def add_response(self, event_id: int, response: str) -> Event:
        """
        Record this device's attendance response (going, interested, not going).

        Raises:
            ValidationError: If the response is not one of the known values.
        """
        try:
            value = EventResponse(str(response).strip().upper().replace(" ", "_").replace("-", "_"))
        except ValueError:
            allowed = ", ".join(r.value for r in EventResponse)
            raise ValidationError(f"Unknown event response '{response}'. Use one of: {allowed}")

        data = self.client.post(f"{self.resource}/{event_id}/response",
                                params={'userId': self.user_id, 'response': value.value})
        return parse_one(data, Event.from_dict, "event")

    def get_upcoming(self) -> List[Event]:
        data = self.client.get(f"{self.resource}/upcoming", params={'userId': self.user_id})
        return parse_list(data, Event.from_dict, "events")

    def search(self, keyword: str) -> List[Event]:
        data = self.client.get(f"{self.resource}/search",
                               params={'keyword': keyword, 'userId': self.user_id})
        return parse_list(data, Event.from_dict, "events")

    def get_by_location(self, location: str) -> List[Event]:
        data = self.client.get(f"{self.resource}/location/{quote(location, safe='')}",
                               params={'userId': self.user_id})
        return parse_list(data, Event.from_dict, "events")

    def get_user_events(self, user_id: Optional[str] = None) -> List[Event]:
        """Fetch the events created by ``user_id`` (this device when omitted)."""
        target = user_id or self.user_id
        data = self.client.get(f"{self.resource}/user/{quote(target, safe='')}",
                               params={'currentUserId': self.user_id})
        return parse_list(data, Event.from_dict, "events")

    def get_today(self) -> List[Event]:
        data = self.client.get(f"{self.resource}/today", params={'userId': self.user_id})
        return parse_list(data, Event.from_dict, "events")

    def get_statistics(self) -> EventStats:
        return parse_one(self.client.get(f"{self.resource}/stats"), EventStats.from_dict, "statistics")

    def health_check(self) -> str:
        return self.client.get(f"{self.resource}/health")

    # PostSource interface used by the feed

    def list_for_feed(self) -> List[Event]:
        return self.get_all()

    def list_for_user(self, user_id: str) -> List[Event]:
        return self.get_user_events(user_id)
