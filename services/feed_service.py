"""
Feed Service Module

This module merges events, lost & found items and announcements into one
chronological feed. Each source is fetched on its own: a failing source is
logged and left out while the others still show. The "my posts" view is the
exception and shows nothing unless all three of the device's lists load.
"""

from typing import Optional, List, Dict, Any

from config import settings
from data.device import DeviceIdStore
from data.models import FeedItem, PostType
from services.protocols import PostSource
from utils.exceptions import CampusFeedError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

MY_POSTS = "my_posts"

FILTER_SOURCES = {
    "all": [PostType.EVENT, PostType.LOST_FOUND, PostType.ANNOUNCEMENT],
    "events": [PostType.EVENT],
    "lost_found": [PostType.LOST_FOUND],
    "announcements": [PostType.ANNOUNCEMENT],
}

SOURCE_LABELS = {
    PostType.EVENT: "events",
    PostType.LOST_FOUND: "lost & found items",
    PostType.ANNOUNCEMENT: "announcements",
}


def normalize_filter(feed_filter: Optional[str]) -> str:
    """
    Resolve a filter name, falling back to the configured default.

    Raises:
        ValidationError: If the filter is not one of the known feed filters.
    """
    value = (feed_filter or settings.DEFAULT_FEED_FILTER).strip().lower().replace("-", "_")
    if value not in FILTER_SOURCES and value != MY_POSTS:
        allowed = ", ".join(list(FILTER_SOURCES) + [MY_POSTS])
        raise ValidationError(f"Unknown feed filter '{feed_filter}'. Use one of: {allowed}")
    return value


def sort_feed(items: List[FeedItem]) -> List[FeedItem]:
    """Newest first; items without a creation time go last in their original order."""
    dated = [item for item in items if item.created_at is not None]
    undated = [item for item in items if item.created_at is None]
    # sorted() with reverse=True keeps equal timestamps in arrival order
    return sorted(dated, key=lambda item: item.created_at, reverse=True) + undated


class FeedService:
    """Loads the merged feed from the three post sources."""

    def __init__(self, sources: Dict[PostType, PostSource], device: DeviceIdStore):
        """
        Initialize the feed service.

        Args:
            sources: The post service for each post type.
            device: Supplies the device identifier for the "my posts" view.
        """
        self.sources = sources
        self.device = device

    def load(self, feed_filter: Optional[str] = None) -> List[FeedItem]:
        """
        Load the feed for a filter.

        Args:
            feed_filter: One of all, events, lost_found, announcements or my_posts.

        Returns:
            List[FeedItem]: The merged feed, newest first.
        """
        feed_filter = normalize_filter(feed_filter)
        if feed_filter == MY_POSTS:
            return self._load_user_posts(self.device.get_device_id())

        items = []
        for post_type in FILTER_SOURCES[feed_filter]:
            try:
                records = self.sources[post_type].list_for_feed()
            except CampusFeedError as e:
                logger.error(f"Failed to load {SOURCE_LABELS[post_type]}: {e}")
                continue
            items.extend(FeedItem.wrap(post_type, record) for record in records)

        logger.debug(f"Loaded {len(items)} feed items for filter '{feed_filter}'")
        return sort_feed(items)

    def _load_user_posts(self, user_id: str) -> List[FeedItem]:
        items = []
        try:
            for post_type in FILTER_SOURCES["all"]:
                records = self.sources[post_type].list_for_user(user_id)
                items.extend(FeedItem.wrap(post_type, record) for record in records)
        except CampusFeedError as e:
            logger.error(f"Failed to load posts for {user_id}: {e}")
            return []
        return sort_feed(items)


class FeedSession:
    """
    The feed as one screen sees it: the current filter and the visible items.

    Mutations go to the backend first. Creating a post, responding to an event
    and resolving an item reload the feed; deleting a post only drops that
    item from the visible list.
    """

    def __init__(self, feed: FeedService, feed_filter: Optional[str] = None):
        self.feed = feed
        self.filter = normalize_filter(feed_filter)
        self.items: List[FeedItem] = []

    def reload(self) -> List[FeedItem]:
        self.items = self.feed.load(self.filter)
        return self.items

    def set_filter(self, feed_filter: str) -> List[FeedItem]:
        self.filter = normalize_filter(feed_filter)
        return self.reload()

    def create_post(self, form) -> Any:
        """
        Submit a creation form, then reload the feed.

        Args:
            form: An EventForm, LostFoundForm or AnnouncementForm.

        Returns:
            The created record.
        """
        record = form.submit(self.feed.sources)
        self.reload()
        return record

    def delete_post(self, post_type: PostType, post_id: int) -> None:
        post_type = PostType(post_type)
        self.feed.sources[post_type].delete(post_id)
        self.items = [item for item in self.items if item.key != (post_type, post_id)]

    def respond_to_event(self, event_id: int, response: str) -> Any:
        event = self.feed.sources[PostType.EVENT].add_response(event_id, response)
        self.reload()
        return event

    def resolve_item(self, item_id: int) -> Any:
        item = self.feed.sources[PostType.LOST_FOUND].resolve(item_id)
        self.reload()
        return item

    def filter_count(self, feed_filter: str) -> int:
        """Count the visible items a filter would keep."""
        feed_filter = normalize_filter(feed_filter)
        if feed_filter == MY_POSTS:
            device_id = self.feed.device.get_device_id()
            return sum(1 for item in self.items if item.created_by == device_id)
        post_types = FILTER_SOURCES[feed_filter]
        return sum(1 for item in self.items if item.post_type in post_types)
