"""Daily signal quota."""

import logging
import threading
from datetime import date, datetime, timezone
from typing import Callable

logger = logging.getLogger(__name__)


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class DailySignalQuota:
    """Count emitted signals per calendar day; the count resets when the day changes."""

    def __init__(self, max_per_day: int, today: Callable[[], date] = _utc_today):
        self.max_per_day = max_per_day
        self._today = today
        self._lock = threading.Lock()
        self._day = today()
        self._count = 0

    def _roll(self) -> None:
        day = self._today()
        if day != self._day:
            logger.info("New trading day %s, resetting signal count (was %d)", day, self._count)
            self._day = day
            self._count = 0

    @property
    def count(self) -> int:
        with self._lock:
            self._roll()
            return self._count

    @property
    def remaining(self) -> int:
        with self._lock:
            self._roll()
            return max(self.max_per_day - self._count, 0)

    def is_exhausted(self) -> bool:
        return self.remaining == 0

    def record(self) -> int:
        """Record one emitted signal and return today's count."""
        with self._lock:
            self._roll()
            self._count += 1
            return self._count
