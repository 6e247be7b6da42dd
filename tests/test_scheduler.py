"""
tests/test_scheduler.py
=======================

Unit tests for meridian.scheduler.CommunicationScheduler
"""

from datetime import date, datetime, timezone

import pytest

from meridian.errors import InvalidValue, MissingRequiredField
from meridian.models import CommunicationType
from meridian.scheduler import CommunicationScheduler, parse_follow_up


def test_create_requires_follow_up_date():
    with pytest.raises(MissingRequiredField) as exc:
        CommunicationScheduler().create(1, "EMAIL", None)
    assert exc.value.field == "next_communication_date"


def test_create_rejects_empty_follow_up_date():
    with pytest.raises(MissingRequiredField):
        CommunicationScheduler().create(1, "EMAIL", "  ")


def test_create_rejects_unknown_type():
    with pytest.raises(InvalidValue) as exc:
        CommunicationScheduler().create(1, "CARRIER_PIGEON", "2026-03-01")
    assert exc.value.field == "type"


def test_create_parses_iso_string():
    c = CommunicationScheduler().create(4, "PLANT_VISIT", "2026-03-01T14:30",
                                        description=" Site survey ",
                                        proposed_next_action="")
    assert c.type is CommunicationType.PLANT_VISIT
    assert c.next_communication_date == datetime(2026, 3, 1, 14, 30)
    assert c.description == "Site survey"
    assert c.proposed_next_action is None


def test_plain_date_means_midnight():
    assert parse_follow_up(date(2026, 3, 1)) == datetime(2026, 3, 1)


@pytest.mark.parametrize("value", [
    "2026-03-12T10:00:00Z",
    "2026-03-12T10:00:00+00:00",
    datetime(2026, 3, 12, 10, 0, tzinfo=timezone.utc),
])
def test_offset_follow_up_becomes_local_naive(value):
    expected = datetime(2026, 3, 12, 10, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    parsed = parse_follow_up(value)
    assert parsed.tzinfo is None
    assert parsed == expected


def test_malformed_date():
    with pytest.raises(InvalidValue):
        parse_follow_up("next tuesday")


def test_reschedule_replaces_only_the_date():
    scheduler = CommunicationScheduler()
    c = scheduler.create(1, "TELEPHONIC", "2026-03-01", description="Call buyer")
    moved = scheduler.reschedule(c, "2026-03-20", new_time="15:45", reason="Buyer travelling")
    assert moved.next_communication_date == datetime(2026, 3, 20, 15, 45)
    assert moved.description == "Call buyer"
    assert c.next_communication_date == datetime(2026, 3, 1)


def test_reschedule_bad_time():
    scheduler = CommunicationScheduler()
    c = scheduler.create(1, "TELEPHONIC", "2026-03-01")
    with pytest.raises(InvalidValue) as exc:
        scheduler.reschedule(c, "2026-03-02", new_time="quarter past")
    assert exc.value.field == "new_time"


def test_reschedule_requires_new_date():
    scheduler = CommunicationScheduler()
    c = scheduler.create(1, "TELEPHONIC", "2026-03-01")
    with pytest.raises(MissingRequiredField) as exc:
        scheduler.reschedule(c, None)
    assert exc.value.field == "new_date"
