"""
Search Service Module

Keyword, location and per-user searches across events and lost & found
items, plus the quick filters (upcoming events, unresolved items, today's
events). Failures are logged and come back as empty results.
"""

from dataclasses import dataclass, field
from typing import List

from data.models import Event, LostFoundItem
from services.events_service import EventsService
from services.lost_found_service import LostFoundService
from utils.exceptions import CampusFeedError
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class SearchResults:
    """Events and lost & found items matched by one search."""
    events: List[Event] = field(default_factory=list)
    items: List[LostFoundItem] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.events) + len(self.items)

    @property
    def is_empty(self) -> bool:
        return self.total == 0


class SearchService:
    """Runs searches against the events and lost & found services."""

    def __init__(self, events: EventsService, lost_found: LostFoundService):
        self.events = events
        self.lost_found = lost_found

    def search(self, term: str) -> SearchResults:
        """
        Search events and lost & found items by keyword.

        Args:
            term: The keyword. A blank term returns no results without calling the backend.

        Returns:
            SearchResults: Matches from both sources.
        """
        if not term or not term.strip():
            return SearchResults()
        term = term.strip()
        try:
            return SearchResults(events=self.events.search(term), items=self.lost_found.search(term))
        except CampusFeedError as e:
            logger.error(f"Search for '{term}' failed: {e}")
            return SearchResults()

    def by_location(self, location: str) -> SearchResults:
        if not location or not location.strip():
            return SearchResults()
        try:
            return SearchResults(events=self.events.get_by_location(location.strip()))
        except CampusFeedError as e:
            logger.error(f"Location search for '{location}' failed: {e}")
            return SearchResults()

    def user_content(self, user_id: str) -> SearchResults:
        """Everything one device has posted as events or lost & found items."""
        try:
            return SearchResults(events=self.events.get_user_events(user_id),
                                 items=self.lost_found.get_user_items(user_id))
        except CampusFeedError as e:
            logger.error(f"Failed to load content for {user_id}: {e}")
            return SearchResults()

    def upcoming_events(self) -> SearchResults:
        try:
            return SearchResults(events=self.events.get_upcoming())
        except CampusFeedError as e:
            logger.error(f"Failed to load upcoming events: {e}")
            return SearchResults()

    def unresolved_items(self) -> SearchResults:
        try:
            return SearchResults(items=self.lost_found.get_unresolved())
        except CampusFeedError as e:
            logger.error(f"Failed to load unresolved items: {e}")
            return SearchResults()

    def today_events(self) -> SearchResults:
        try:
            return SearchResults(events=self.events.get_today())
        except CampusFeedError as e:
            logger.error(f"Failed to load today's events: {e}")
            return SearchResults()
