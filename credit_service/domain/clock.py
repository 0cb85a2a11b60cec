"""Injectable time source so domain and service code never call datetime.now() directly"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta


class Clock(ABC):
    """Abstract clock interface"""

    @abstractmethod
    def now(self) -> datetime:
        """Current local time (naive)"""
        ...

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Production clock backed by the system time"""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock(Clock):
    """
    Test clock with controlled time.

    Returns the same value on repeated calls until ``advance()`` or
    ``set_time()`` is called.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = fixed_time or datetime(2024, 3, 20, 12, 0, 0)

    def now(self) -> datetime:
        return self._fixed_time

    def set_time(self, time: datetime) -> None:
        self._fixed_time = time

    def advance(self, seconds: int = 1) -> None:
        self._fixed_time += timedelta(seconds=seconds)
