"""
API Check Service Module

A smoke-test suite for the backend: a fixed list of read-only calls grouped
into categories, run one after another, each timed and recorded as a pass
or a failure. Nothing is written to the backend.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from services.events_service import EventsService
from services.lost_found_service import LostFoundService
from utils.exceptions import CampusFeedError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

CATEGORIES = ("health", "events", "lostfound")
SUCCESS = "success"
ERROR = "error"


@dataclass
class ApiCheck:
    category: str
    name: str
    call: Callable[[], Any]


@dataclass
class CheckResult:
    name: str
    category: str
    status: str
    duration_ms: int
    result_size: Optional[int] = None
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == SUCCESS


@dataclass
class CheckReport:
    results: List[CheckResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for result in self.results if result.passed)

    @property
    def error_count(self) -> int:
        return len(self.results) - self.success_count

    def summary(self) -> str:
        return f"{self.success_count} passed, {self.error_count} failed, {len(self.results)} total"


def _result_size(result: Any) -> Optional[int]:
    if result is None:
        return None
    if isinstance(result, (list, dict, str)):
        return len(result)
    return 1


class ApiCheckService:
    """Runs the endpoint checks."""

    def __init__(self, events: EventsService, lost_found: LostFoundService):
        self.events = events
        self.lost_found = lost_found
        self.checks = self._build_checks()

    def _build_checks(self) -> List[ApiCheck]:
        events, lost_found = self.events, self.lost_found
        return [
            ApiCheck("health", "Events API Health", events.health_check),
            ApiCheck("health", "Lost&Found API Health", lost_found.health_check),

            ApiCheck("events", "Get All Events", events.get_all),
            ApiCheck("events", "Get Upcoming Events", events.get_upcoming),
            ApiCheck("events", "Today's Events", events.get_today),
            ApiCheck("events", "Events Statistics", events.get_statistics),
            ApiCheck("events", "Search Events", lambda: events.search("workshop")),
            ApiCheck("events", "Events by Location", lambda: events.get_by_location("CSE Lab")),
            ApiCheck("events", "User Events", events.get_user_events),

            ApiCheck("lostfound", "Get All Lost&Found", lost_found.get_all),
            ApiCheck("lostfound", "Lost&Found Statistics", lost_found.get_statistics),
            ApiCheck("lostfound", "Recent Items", lost_found.get_recent),
            ApiCheck("lostfound", "Unresolved Items", lost_found.get_unresolved),
            ApiCheck("lostfound", "Lost Items Only", lambda: lost_found.get_by_type("lost")),
            ApiCheck("lostfound", "Found Items Only", lambda: lost_found.get_by_type("found")),
            ApiCheck("lostfound", "Search Lost&Found", lambda: lost_found.search("wallet")),
            ApiCheck("lostfound", "User Lost&Found", lost_found.get_user_items),
        ]

    def select(self, category: str = "all") -> List[ApiCheck]:
        """
        Pick the checks for a category.

        Raises:
            ValidationError: If the category is unknown.
        """
        category = (category or "all").strip().lower()
        if category == "all":
            return list(self.checks)
        if category not in CATEGORIES:
            raise ValidationError(f"Unknown check category '{category}'. "
                                  f"Use all, {', '.join(CATEGORIES)}")
        return [check for check in self.checks if check.category == category]

    def run_check(self, check: ApiCheck) -> CheckResult:
        start = time.perf_counter()
        try:
            result = check.call()
        except CampusFeedError as e:
            duration = int((time.perf_counter() - start) * 1000)
            logger.warning(f"Check failed: {check.name}: {e}")
            return CheckResult(check.name, check.category, ERROR, duration, error=str(e) or "Unknown error")
        duration = int((time.perf_counter() - start) * 1000)
        return CheckResult(check.name, check.category, SUCCESS, duration, result_size=_result_size(result))

    def run(self, category: str = "all") -> CheckReport:
        """
        Run the checks of a category sequentially.

        Args:
            category: all, health, events or lostfound.

        Returns:
            CheckReport: One result per check, in run order.
        """
        report = CheckReport()
        for check in self.select(category):
            report.results.append(self.run_check(check))
        logger.info(f"API checks ({category}): {report.summary()}")
        return report
