"""
meridian.tasks
==============

Task derivation engine.

The worklist is never stored.  Every read rebuilds it from the current
quotations and communications:

* each DRAFT / LIVE quotation yields one QUOTATION task, due on its
  validity (expiry) date;
* each communication with a follow-up date yields one COMMUNICATION task,
  due on that date.  Several communications on the same enquiry each get
  their own task.

Anything else yields nothing, which is how finished work drops off the
list.  The result is annotated by :class:`~meridian.priority.PriorityClassifier`
and sorted by due date, then type, then source id, so the same snapshot
always produces the same list.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from datetime import date, datetime, time
from typing import Dict, Iterable, List, Mapping, Optional

from .models import (
    Communication,
    CommunicationTaskStatus,
    Priority,
    Quotation,
    Task,
    TaskType,
)
from .presentation import label_for
from .priority import PriorityClassifier

UNKNOWN_CUSTOMER = "Unknown customer"
DEFAULT_FOLLOW_UP = "Follow up required"


def _as_datetime(value: date) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def quotation_task(q: Quotation, customer_name: str) -> Optional[Task]:
    """Return the task for an active quotation, else None."""
    if not q.is_active:
        return None
    due = _as_datetime(q.validity_period) if q.validity_period else q.created_at
    return Task(
        type=TaskType.QUOTATION,
        id=q.id,
        due_date=due,
        customer_name=customer_name,
        task_description=f"Quotation #{q.quotation_number or q.id}",
        status=q.status.value,
    )


def communication_status(due: datetime, today: date) -> CommunicationTaskStatus:
    if due.date() < today:
        return CommunicationTaskStatus.OVERDUE
    if due.date() == today:
        return CommunicationTaskStatus.DUE_TODAY
    return CommunicationTaskStatus.SCHEDULED


def communication_task(c: Communication, customer_name: str, today: date) -> Optional[Task]:
    """Return the follow-up task for a communication, else None."""
    if c.next_communication_date is None:
        return None
    due = _as_datetime(c.next_communication_date)
    action = c.proposed_next_action or c.description or DEFAULT_FOLLOW_UP
    return Task(
        type=TaskType.COMMUNICATION,
        id=c.id,
        due_date=due,
        customer_name=customer_name,
        task_description=f"{label_for(c.type)} - {action}",
        status=communication_status(due, today).value,
    )


class TaskDerivationEngine:
    """
    Builds the prioritised worklist.  Pure: calling :pymeth:`derive` twice
    on the same inputs returns equal lists.
    """

    def __init__(self, classifier: Optional[PriorityClassifier] = None) -> None:
        self.classifier = classifier or PriorityClassifier()

    def derive(
        self,
        quotations: Iterable[Quotation],
        communications: Iterable[Communication],
        customer_names: Mapping[int, str],
    ) -> List[Task]:
        """
        Parameters
        ----------
        quotations, communications
            Current rows; order does not matter.
        customer_names
            Enquiry id → customer (company) name.
        """
        today = self.classifier.clock.today()
        tasks: List[Task] = []

        for q in quotations:
            task = quotation_task(q, customer_names.get(q.enquiry_id, UNKNOWN_CUSTOMER))
            if task is not None:
                tasks.append(task)

        for c in communications:
            task = communication_task(c, customer_names.get(c.enquiry_id, UNKNOWN_CUSTOMER), today)
            if task is not None:
                tasks.append(task)

        tasks = [replace(t, priority=self.classifier.classify(t)) for t in tasks]
        tasks.sort(key=Task.sort_key)
        return tasks


def filter_tasks(tasks: Iterable[Task], task_type: Optional[TaskType] = None,
                 priority: Optional[Priority] = None) -> List[Task]:
    return [
        t for t in tasks
        if (task_type is None or t.type == task_type)
        and (priority is None or t.priority == priority)
    ]


def summarize(tasks: Iterable[Task]) -> Dict[str, Dict[str, int]]:
    """Counts per priority and per type, zero-filled."""
    tasks = list(tasks)
    by_priority = Counter(t.priority.value for t in tasks)
    by_type = Counter(t.type.value for t in tasks)
    return {
        "total": {"all": len(tasks)},
        "by_priority": {p.value: by_priority.get(p.value, 0) for p in Priority},
        "by_type": {t.value: by_type.get(t.value, 0) for t in TaskType},
    }
