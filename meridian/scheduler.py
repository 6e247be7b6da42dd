"""
meridian.scheduler
==================

Creation and rescheduling of communications.

A communication is only accepted with a follow-up date; that date is what
puts a COMMUNICATION task on the worklist.  After creation the only change
allowed is :pymeth:`CommunicationScheduler.reschedule`, which swaps the
follow-up date.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time
from typing import Any, Optional

from .errors import InvalidValue, MissingRequiredField
from .models import Communication, CommunicationType
from .rules import is_blank

logger = logging.getLogger(__name__)


def _to_local_naive(value: datetime) -> datetime:
    # stored follow-ups are naive local time, like created_at and the clock
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_follow_up(value: Any, field: str = "next_communication_date") -> datetime:
    """
    Accept a datetime, a date (midnight) or an ISO-8601 string.  Values
    carrying an offset (`...Z`, `+02:00`) are converted to local time.
    """
    if is_blank(value):
        raise MissingRequiredField(field)
    if isinstance(value, datetime):
        return _to_local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            pass
        else:
            return _to_local_naive(parsed)
    raise InvalidValue(field, "must be a date or date-time (ISO 8601)")


def parse_time_of_day(value: str) -> time:
    """Parse ``HH:MM``."""
    try:
        hours, minutes = value.strip().split(":")
        return time(int(hours), int(minutes))
    except ValueError:
        raise InvalidValue("new_time", "must be HH:MM") from None


class CommunicationScheduler:
    """Validates new communications and follow-up date changes."""

    def create(
        self,
        enquiry_id: int,
        type: Any,
        next_communication_date: Any,
        description: str = "",
        proposed_next_action: Optional[str] = None,
    ) -> Communication:
        """Return a new, unsaved :class:`Communication`."""
        if enquiry_id is None:
            raise MissingRequiredField("enquiry_id")
        if is_blank(type):
            raise MissingRequiredField("type")
        try:
            comm_type = CommunicationType(type)
        except ValueError:
            allowed = ", ".join(t.value for t in CommunicationType)
            raise InvalidValue("type", f"must be one of {allowed}") from None

        due = parse_follow_up(next_communication_date)
        return Communication(
            enquiry_id=enquiry_id,
            type=comm_type,
            next_communication_date=due,
            description=(description or "").strip(),
            proposed_next_action=(proposed_next_action or "").strip() or None,
        )

    def reschedule(
        self,
        communication: Communication,
        new_date: Any,
        new_time: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Communication:
        """Return a copy of *communication* with a new follow-up date."""
        due = parse_follow_up(new_date, field="new_date")
        if new_time:
            due = datetime.combine(due.date(), parse_time_of_day(new_time))
        logger.info(
            f"Communication {communication.id} rescheduled "
            f"{communication.next_communication_date:%Y-%m-%d %H:%M} → {due:%Y-%m-%d %H:%M}"
            + (f" ({reason})" if reason else "")
        )
        return replace(communication, next_communication_date=due)
