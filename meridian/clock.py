"""
meridian.clock
==============

Time source used by the priority classifier and the task engine.
Tests pin time with :class:`FixedClock` instead of patching ``datetime``.
"""

from __future__ import annotations

from datetime import date, datetime


class SystemClock:
    """Wall-clock time of the running process."""

    def now(self) -> datetime:
        return datetime.now()

    def today(self) -> date:
        return self.now().date()


class FixedClock(SystemClock):
    """A clock that always reports the same instant."""

    def __init__(self, instant: datetime) -> None:
        self.instant = instant

    def now(self) -> datetime:
        return self.instant
