"""
Clock -- the registry's notion of "today".

Valuations without an explicit as-of date are taken at ``clock.today()``.
Services receive a Clock by constructor injection; engines take dates as
arguments and never read a clock.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime


class Clock(ABC):
    """Source of the current time; ``today()`` is its calendar date."""

    @abstractmethod
    def now(self) -> datetime: ...

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """
    Wall clock in the host's local timezone.

    Book values change at local midnight, which is when the people
    reading the registry see the date change.
    """

    def now(self) -> datetime:
        return datetime.now().astimezone()


class DeterministicClock(Clock):
    """Clock frozen at ``fixed_time`` until moved with ``set_time``."""

    def __init__(self, fixed_time: datetime):
        self._fixed_time = fixed_time

    @classmethod
    def on(cls, day: date) -> "DeterministicClock":
        """Clock frozen at noon of ``day``."""
        return cls(datetime(day.year, day.month, day.day, 12))

    def now(self) -> datetime:
        return self._fixed_time

    def set_time(self, fixed_time: datetime) -> None:
        self._fixed_time = fixed_time
