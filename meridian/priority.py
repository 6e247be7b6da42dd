"""
meridian.priority
=================

Classify a task as high / medium / low from its due date alone.

* due today or earlier → ``high`` (overdue work is always high, whatever
  the task type)
* due within ``window_days`` of today → ``medium``
* anything later → ``low``
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from .clock import SystemClock
from .models import Priority, Task

DEFAULT_WINDOW_DAYS = 7


def classify_due(due: Union[date, datetime, None], today: date,
                 window_days: int = DEFAULT_WINDOW_DAYS) -> Priority:
    """Pure classification of a due date relative to *today*."""
    if due is None:
        return Priority.LOW
    if isinstance(due, datetime):
        due = due.date()
    days_left = (due - today).days
    if days_left <= 0:
        return Priority.HIGH
    if days_left <= window_days:
        return Priority.MEDIUM
    return Priority.LOW


class PriorityClassifier:
    """
    Bound to a clock and a near-term window.

    >>> from meridian.clock import FixedClock
    >>> clf = PriorityClassifier(FixedClock(datetime(2026, 3, 10)), window_days=3)
    >>> clf.classify_date(date(2026, 3, 12))
    <Priority.MEDIUM: 'medium'>
    """

    def __init__(self, clock: Optional[SystemClock] = None,
                 window_days: int = DEFAULT_WINDOW_DAYS) -> None:
        self.clock = clock or SystemClock()
        self.window_days = window_days

    def classify_date(self, due: Union[date, datetime, None]) -> Priority:
        return classify_due(due, self.clock.today(), self.window_days)

    def classify(self, task: Task) -> Priority:
        return self.classify_date(task.due_date)
