"""
tests/test_service.py
=====================

Behaviour of meridian.service.BackOffice end to end over the in-memory
store: gated transitions, communications, and the derived worklist.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from meridian.errors import (
    ConcurrentModification,
    InvalidValue,
    MissingRequiredField,
    NotFound,
)
from meridian.models import (
    EnquiryStatus,
    EntityKind,
    Priority,
    QuotationStatus,
    TaskType,
)

TODAY = date(2026, 3, 10)


# ---------------------------------------------------------------------------
# Enquiry transitions
# ---------------------------------------------------------------------------
def test_rcd_without_date_fails_and_status_is_unchanged(office, enquiry):
    with pytest.raises(MissingRequiredField) as exc:
        office.update_enquiry_status(enquiry.id, EnquiryStatus.RCD, {})
    assert exc.value.field == "date_of_receipt"
    assert office.get_enquiry(enquiry.id).status is EnquiryStatus.LIVE


def test_won_with_po_fields(office, enquiry):
    po_date = date(2026, 3, 1)
    won = office.update_enquiry_status(
        enquiry.id, "WON", {"purchase_order_number": "PO-1", "po_value": 1000, "po_date": po_date}
    )
    stored = office.get_enquiry(enquiry.id)
    for e in (won, stored):
        assert e.status is EnquiryStatus.WON
        assert e.purchase_order_number == "PO-1"
        assert e.po_value == 1000
        assert e.po_date == po_date


def test_update_unknown_enquiry(office):
    with pytest.raises(NotFound) as exc:
        office.update_enquiry_status(404, "DEAD")
    assert exc.value.details() == {"entity_kind": "ENQUIRY", "id": 404}


def test_each_write_bumps_version(office, enquiry):
    assert enquiry.version == 1
    dead = office.update_enquiry_status(enquiry.id, "DEAD")
    assert dead.version == 2
    assert dead.updated_at == datetime(2026, 3, 10, 9, 30)


def test_stale_expected_version_is_rejected(office, enquiry):
    office.update_enquiry_status(enquiry.id, "DEAD")
    with pytest.raises(ConcurrentModification):
        office.update_enquiry_status(enquiry.id, "LIVE", expected_version=1)
    assert office.get_enquiry(enquiry.id).status is EnquiryStatus.DEAD


def test_store_rejects_write_from_stale_copy(office, enquiry):
    stale = office.get_enquiry(enquiry.id)
    office.update_enquiry_status(enquiry.id, "BUDGETARY")
    with pytest.raises(ConcurrentModification):
        office.store.save(EntityKind.ENQUIRY, stale)


def test_enquiry_needs_existing_company(office):
    with pytest.raises(NotFound):
        office.create_enquiry(12, "Orphan")


def test_status_counts_are_zero_filled(office, enquiry):
    counts = office.status_counts(EntityKind.ENQUIRY)
    assert counts == {"LIVE": 1, "DEAD": 0, "RCD": 0, "WON": 0, "LOST": 0, "BUDGETARY": 0}


# ---------------------------------------------------------------------------
# Quotations
# ---------------------------------------------------------------------------
def test_lost_needs_reason(office, enquiry):
    q = office.create_quotation(enquiry.id, 5000, TODAY + timedelta(days=5), status="LIVE")
    with pytest.raises(MissingRequiredField) as exc:
        office.update_quotation_status(q.id, QuotationStatus.LOST, {})
    assert exc.value.field == "lost_reason"
    lost = office.update_quotation_status(q.id, QuotationStatus.LOST, {"lost_reason": "PRICE"})
    assert lost.status is QuotationStatus.LOST


def test_quotation_number_generated_and_unique(office, enquiry):
    a = office.create_quotation(enquiry.id)
    b = office.create_quotation(enquiry.id)
    assert a.quotation_number.startswith("Q202603")
    assert a.quotation_number != b.quotation_number
    with pytest.raises(InvalidValue) as exc:
        office.create_quotation(enquiry.id, quotation_number=a.quotation_number)
    assert exc.value.field == "quotation_number"


def test_new_quotation_must_be_draft_or_live(office, enquiry):
    with pytest.raises(InvalidValue):
        office.create_quotation(enquiry.id, status="WON")


def test_quotation_bad_validity(office, enquiry):
    with pytest.raises(InvalidValue) as exc:
        office.create_quotation(enquiry.id, validity_period="soon")
    assert exc.value.field == "validity_period"


def test_quotation_transition_does_not_touch_enquiry(office, enquiry):
    q = office.create_quotation(enquiry.id, status="LIVE")
    office.update_quotation_status(q.id, "WON", {"purchase_order_number": "PO-3"})
    assert office.get_enquiry(enquiry.id).status is EnquiryStatus.LIVE


# ---------------------------------------------------------------------------
# Worklist
# ---------------------------------------------------------------------------
def test_upcoming_tasks_idempotent(office, enquiry):
    office.create_quotation(enquiry.id, 100, TODAY + timedelta(days=2), status="LIVE")
    office.create_communication(enquiry.id, "EMAIL", TODAY - timedelta(days=1), "Sent drawings")
    office.create_communication(enquiry.id, "TELEPHONIC", TODAY + timedelta(days=1), "Call")
    assert office.get_upcoming_tasks() == office.get_upcoming_tasks()


@pytest.mark.parametrize("final", ["DEAD", "BUDGETARY", "WON", "RECEIVED", "LOST"])
def test_closed_quotations_leave_the_worklist(office, enquiry, final):
    q = office.create_quotation(enquiry.id, 100, TODAY + timedelta(days=2), status="LIVE")
    assert [t.id for t in office.get_upcoming_tasks(TaskType.QUOTATION)] == [q.id]
    payload = {"lost_reason": "OTHER"} if final == "LOST" else {"purchase_order_number": "PO-1"}
    if final in ("DEAD", "BUDGETARY"):
        payload = {}
    office.update_quotation_status(q.id, final, payload)
    assert office.get_upcoming_tasks(TaskType.QUOTATION) == []


def test_overdue_communication_then_reschedule(office, enquiry):
    comm = office.create_communication(
        enquiry.id, "VIRTUAL_MEETING", TODAY - timedelta(days=1), "Kick-off",
        proposed_next_action="Share minutes",
    )
    (task,) = office.get_upcoming_tasks(TaskType.COMMUNICATION)
    assert task.id == comm.id
    assert task.priority is Priority.HIGH
    assert task.customer_name == "ACME Steel"

    office.reschedule_communication(comm.id, TODAY + timedelta(days=10))
    (task,) = office.get_upcoming_tasks(TaskType.COMMUNICATION)
    assert task.due_date.date() == TODAY + timedelta(days=10)
    assert task.priority is not Priority.HIGH


def test_live_quotation_then_won(office, enquiry):
    q = office.create_quotation(enquiry.id, 900, TODAY + timedelta(days=1), status="LIVE")
    assert any(t.type is TaskType.QUOTATION and t.id == q.id for t in office.get_upcoming_tasks())
    office.update_quotation_status(
        q.id, "WON", {"purchase_order_number": "PO-1", "po_value": 900, "po_date": TODAY}
    )
    assert not any(t.type is TaskType.QUOTATION for t in office.get_upcoming_tasks())


def test_communication_on_missing_enquiry(office):
    with pytest.raises(NotFound):
        office.create_communication(77, "EMAIL", TODAY)


def test_communication_requires_follow_up(office, enquiry):
    with pytest.raises(MissingRequiredField):
        office.create_communication(enquiry.id, "EMAIL", "")
    assert office.get_upcoming_tasks() == []


def test_task_summary(office, enquiry):
    office.create_quotation(enquiry.id, 1, TODAY - timedelta(days=3), status="DRAFT")
    office.create_communication(enquiry.id, "OFFICE_VISIT", TODAY + timedelta(days=30))
    summary = office.task_summary()
    assert summary["by_priority"] == {"high": 1, "medium": 0, "low": 1}
    assert summary["by_type"] == {"QUOTATION": 1, "COMMUNICATION": 1}


def test_utc_follow_up_sorts_with_quotation_tasks(office, enquiry):
    q = office.create_quotation(enquiry.id, 100, TODAY + timedelta(days=1), status="LIVE")
    comm = office.create_communication(enquiry.id, "EMAIL", "2026-03-12T10:00:00+00:00")
    tasks = office.get_upcoming_tasks()
    assert [(t.type, t.id) for t in tasks] == [(TaskType.QUOTATION, q.id), (TaskType.COMMUNICATION, comm.id)]
    assert tasks[1].due_date.tzinfo is None
    assert tasks[1].due_date == datetime(2026, 3, 12, 10, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
