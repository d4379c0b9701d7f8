"""
Lost & Found Service Module

This module handles the ``/lost-found`` endpoints: item reports, marking an
item resolved, filtering by type, and statistics.
"""

from typing import Optional, List, Dict, Any
from urllib.parse import quote

from data.device import DeviceIdStore
from data.models import LostFoundItem, LostFoundType, LostFoundStats
from services.api_client import ApiClient, parse_list, parse_one
from utils.exceptions import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class LostFoundService:
    """Service for lost and found item reports."""

    resource = "/lost-found"

    def __init__(self, client: ApiClient, device: DeviceIdStore):
        self.client = client
        self.device = device

    @property
    def user_id(self) -> str:
        return self.device.get_device_id()

    def get_all(self) -> List[LostFoundItem]:
        return parse_list(self.client.get(self.resource), LostFoundItem.from_dict, "items")

    def get_by_id(self, item_id: int) -> LostFoundItem:
        return parse_one(self.client.get(f"{self.resource}/{item_id}"), LostFoundItem.from_dict, "item")

    def create(self, payload: Dict[str, Any]) -> LostFoundItem:
        data = self.client.post(self.resource, params={'userId': self.user_id}, json_body=payload)
        item = parse_one(data, LostFoundItem.from_dict, "item")
        logger.info(f"Reported {item.type.value.lower()} item {item.id}: {item.item_name}")
        return item

    def update(self, item_id: int, payload: Dict[str, Any]) -> LostFoundItem:
        data = self.client.put(f"{self.resource}/{item_id}", params={'userId': self.user_id},
                               json_body=payload)
        return parse_one(data, LostFoundItem.from_dict, "item")

    def delete(self, item_id: int) -> None:
        self.client.delete(f"{self.resource}/{item_id}", params={'userId': self.user_id})
        logger.info(f"Deleted lost & found item {item_id}")

    def resolve(self, item_id: int) -> LostFoundItem:
        """Mark an item as returned to its owner."""
        data = self.client.post(f"{self.resource}/{item_id}/resolve", params={'userId': self.user_id})
        return parse_one(data, LostFoundItem.from_dict, "item")

    def get_by_type(self, item_type: str) -> List[LostFoundItem]:
        """
        Fetch only lost or only found items.

        Raises:
            ValidationError: If item_type is neither lost nor found.
        """
        try:
            value = LostFoundType(str(item_type).strip().upper())
        except ValueError:
            raise ValidationError(f"Unknown item type '{item_type}'. Use lost or found")
        data = self.client.get(f"{self.resource}/type/{value.value.lower()}")
        return parse_list(data, LostFoundItem.from_dict, "items")

    def get_unresolved(self) -> List[LostFoundItem]:
        return parse_list(self.client.get(f"{self.resource}/unresolved"), LostFoundItem.from_dict, "items")

    def search(self, keyword: str) -> List[LostFoundItem]:
        data = self.client.get(f"{self.resource}/search", params={'keyword': keyword})
        return parse_list(data, LostFoundItem.from_dict, "items")

    def get_statistics(self) -> LostFoundStats:
        return parse_one(self.client.get(f"{self.resource}/stats"), LostFoundStats.from_dict, "statistics")

    def get_user_items(self, user_id: Optional[str] = None) -> List[LostFoundItem]:
        target = user_id or self.user_id
        data = self.client.get(f"{self.resource}/user/{quote(target, safe='')}")
        return parse_list(data, LostFoundItem.from_dict, "items")

    def get_recent(self) -> List[LostFoundItem]:
        return parse_list(self.client.get(f"{self.resource}/recent"), LostFoundItem.from_dict, "items")

    def health_check(self) -> str:
        return self.client.get(f"{self.resource}/health")

    # PostSource interface used by the feed

    def list_for_feed(self) -> List[LostFoundItem]:
        return self.get_all()

    def list_for_user(self, user_id: str) -> List[LostFoundItem]:
        return self.get_user_items(user_id)
