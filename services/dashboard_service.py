"""
Dashboard Service Module

Gathers the numbers behind the dashboard screen: event and lost & found
statistics, today's events, recently reported items and the health of each
backend API.
"""

from dataclasses import dataclass, field
from typing import List, Dict

import pandas as pd

from data.models import Event, EventStats, LostFoundItem, LostFoundStats
from services.events_service import EventsService
from services.lost_found_service import LostFoundService
from utils.exceptions import CampusFeedError
from utils.logger import get_logger

logger = get_logger(__name__)

ONLINE = "online"
OFFLINE = "offline"


@dataclass
class DashboardData:
    event_stats: EventStats = field(default_factory=EventStats)
    lost_found_stats: LostFoundStats = field(default_factory=LostFoundStats)
    today_events: List[Event] = field(default_factory=list)
    recent_items: List[LostFoundItem] = field(default_factory=list)
    health: Dict[str, str] = field(default_factory=dict)


class DashboardService:
    """Loads dashboard data and checks API health."""

    def __init__(self, events: EventsService, lost_found: LostFoundService):
        self.events = events
        self.lost_found = lost_found

    def load(self) -> DashboardData:
        """
        Load everything the dashboard shows.

        Statistics and lists are gathered together; if any of those calls fails
        the error is logged and the dashboard shows empty data. Health is checked
        separately for each API so one being down does not hide the other.

        Returns:
            DashboardData: The gathered data.
        """
        try:
            data = DashboardData(
                event_stats=self.events.get_statistics(),
                lost_found_stats=self.lost_found.get_statistics(),
                today_events=self.events.get_today(),
                recent_items=self.lost_found.get_recent(),
            )
        except CampusFeedError as e:
            logger.error(f"Failed to load dashboard data: {e}")
            data = DashboardData()

        data.health = self.check_health()
        return data

    def check_health(self) -> Dict[str, str]:
        health = {}
        for name, service in (("events", self.events), ("lostfound", self.lost_found)):
            try:
                service.health_check()
                health[name] = ONLINE
            except CampusFeedError as e:
                logger.warning(f"{name} API health check failed: {e}")
                health[name] = OFFLINE
        return health

    @staticmethod
    def stats_frame(data: DashboardData) -> pd.DataFrame:
        """
        Flatten the statistics into a table.

        Args:
            data: Loaded dashboard data.

        Returns:
            pd.DataFrame: One row per metric with columns section, metric and count.
        """
        rows = [
            ("events", "total", data.event_stats.total),
            ("events", "upcoming", data.event_stats.upcoming),
            ("events", "past", data.event_stats.past),
            ("lost_found", "total", data.lost_found_stats.total),
            ("lost_found", "lost", data.lost_found_stats.lost),
            ("lost_found", "found", data.lost_found_stats.found),
            ("lost_found", "resolved", data.lost_found_stats.resolved),
            ("lost_found", "unresolved", data.lost_found_stats.unresolved),
        ]
        return pd.DataFrame(rows, columns=["section", "metric", "count"])
