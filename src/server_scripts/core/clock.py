"""Clock abstraction for testing.

Snapshot generation stamps the current time into the header. Injecting the
clock keeps builder output deterministic in tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class Clock(ABC):
    """Abstract clock operations for dependency injection."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current local time, timezone-aware."""
        ...


class RealClock(Clock):
    """Production implementation using the system clock."""

    def now(self) -> datetime:
        return datetime.now().astimezone()
