"""
Announcements Service Module

This module handles the ``/announcements`` endpoints: departmental notices
with a type, a priority, optional expiry and pinning.
"""

from typing import Optional, List, Dict, Any
from urllib.parse import quote

from data.device import DeviceIdStore
from data.models import Announcement, AnnouncementType, AnnouncementStats, Priority
from services.api_client import ApiClient, parse_list, parse_one
from utils.exceptions import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class AnnouncementsService:
    """Service for announcements."""

    resource = "/announcements"

    def __init__(self, client: ApiClient, device: DeviceIdStore):
        self.client = client
        self.device = device

    @property
    def user_id(self) -> str:
        return self.device.get_device_id()

    def _list(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> List[Announcement]:
        return parse_list(self.client.get(endpoint, params=params), Announcement.from_dict, "announcements")

    def get_all(self) -> List[Announcement]:
        return self._list(self.resource)

    def get_by_id(self, announcement_id: int) -> Announcement:
        data = self.client.get(f"{self.resource}/{announcement_id}")
        return parse_one(data, Announcement.from_dict, "announcement")

    def create(self, payload: Dict[str, Any]) -> Announcement:
        data = self.client.post(self.resource, params={'userId': self.user_id}, json_body=payload)
        announcement = parse_one(data, Announcement.from_dict, "announcement")
        logger.info(f"Posted announcement {announcement.id}: {announcement.title}")
        return announcement

    def update(self, announcement_id: int, payload: Dict[str, Any]) -> Announcement:
        data = self.client.put(f"{self.resource}/{announcement_id}", params={'userId': self.user_id},
                               json_body=payload)
        return parse_one(data, Announcement.from_dict, "announcement")

    def delete(self, announcement_id: int) -> None:
        """Delete (deactivate) an announcement created by this device."""
        self.client.delete(f"{self.resource}/{announcement_id}", params={'userId': self.user_id})
        logger.info(f"Deleted announcement {announcement_id}")

    def toggle_pin(self, announcement_id: int) -> Announcement:
        data = self.client.post(f"{self.resource}/{announcement_id}/toggle-pin",
                                params={'userId': self.user_id})
        return parse_one(data, Announcement.from_dict, "announcement")

    def get_by_department(self, department: str) -> List[Announcement]:
        return self._list(f"{self.resource}/department/{quote(department, safe='')}")

    def get_by_type(self, announcement_type: str) -> List[Announcement]:
        try:
            value = AnnouncementType(str(announcement_type).strip().upper())
        except ValueError:
            allowed = ", ".join(t.value for t in AnnouncementType)
            raise ValidationError(f"Unknown announcement type '{announcement_type}'. Use one of: {allowed}")
        return self._list(f"{self.resource}/type/{value.value}")

    def get_by_priority(self, priority: str) -> List[Announcement]:
        try:
            value = Priority(str(priority).strip().upper())
        except ValueError:
            allowed = ", ".join(p.value for p in Priority)
            raise ValidationError(f"Unknown priority '{priority}'. Use one of: {allowed}")
        return self._list(f"{self.resource}/priority/{value.value}")

    def get_pinned(self) -> List[Announcement]:
        return self._list(f"{self.resource}/pinned")

    def get_user_announcements(self, user_id: Optional[str] = None) -> List[Announcement]:
        target = user_id or self.user_id
        return self._list(f"{self.resource}/user/{quote(target, safe='')}")

    def search(self, keyword: str) -> List[Announcement]:
        return self._list(f"{self.resource}/search", params={'keyword': keyword})

    def get_recent(self) -> List[Announcement]:
        return self._list(f"{self.resource}/recent")

    def get_active(self) -> List[Announcement]:
        """Fetch announcements that have not expired."""
        return self._list(f"{self.resource}/active")

    def get_statistics(self) -> AnnouncementStats:
        return parse_one(self.client.get(f"{self.resource}/stats"), AnnouncementStats.from_dict, "statistics")

    def health_check(self) -> str:
        return self.client.get(f"{self.resource}/health")

    # PostSource interface used by the feed

    def list_for_feed(self) -> List[Announcement]:
        return self.get_all()

    def list_for_user(self, user_id: str) -> List[Announcement]:
        return self.get_user_announcements(user_id)
