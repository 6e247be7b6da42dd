"""
tests/test_store_db.py
======================

Integration-style tests for the SQLite-backed store.

These mirror `test_store.py` but go through DBStore on a private
in-memory engine so the project database file is never touched.
"""

from datetime import date, datetime

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from meridian.clock import FixedClock
from meridian.db import create_all
from meridian.errors import ConcurrentModification, NotFound
from meridian.models import (
    Communication,
    CommunicationType,
    Company,
    Enquiry,
    EnquiryStatus,
    EntityKind,
    LostReason,
    Quotation,
    QuotationStatus,
    TaskType,
)
from meridian.service import BackOffice
from meridian.settings import Settings
from meridian.store_db import DBStore


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_all(eng)
    return eng


@pytest.fixture
def seeded(engine):
    """One company with one enquiry; returns (company, enquiry)."""
    with DBStore(engine=engine) as store:
        acme = store.add(EntityKind.COMPANY, Company("ACME Steel"))
        enq = store.add(EntityKind.ENQUIRY, Enquiry(company_id=acme.id, subject="Ladle"))
    return acme, enq


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------
def test_persistence_across_sessions(engine, seeded):
    _, enq = seeded
    with DBStore(engine=engine) as store:
        fetched = store.load(EntityKind.ENQUIRY, enq.id)
    assert fetched.subject == "Ladle"
    assert fetched.status is EnquiryStatus.LIVE
    assert fetched.version == 1


def test_round_trip_of_optional_fields(engine, seeded):
    _, enq = seeded
    with DBStore(engine=engine) as store:
        q = store.add(EntityKind.QUOTATION, Quotation(
            enquiry_id=enq.id,
            quotation_number="Q202603000001",
            status=QuotationStatus.LOST,
            validity_period=date(2026, 4, 1),
            lost_reason=LostReason.PRICE,
        ))
        c = store.add(EntityKind.COMMUNICATION, Communication(
            enquiry_id=enq.id,
            type=CommunicationType.EMAIL,
            next_communication_date=datetime(2026, 3, 12, 14, 0),
        ))
    with DBStore(engine=engine) as store:
        q2 = store.load(EntityKind.QUOTATION, q.id)
        c2 = store.load(EntityKind.COMMUNICATION, c.id)
    assert q2.lost_reason is LostReason.PRICE
    assert q2.validity_period == date(2026, 4, 1)
    assert c2.next_communication_date == datetime(2026, 3, 12, 14, 0)
    assert c2.proposed_next_action is None


def test_save_compare_and_swap(engine, seeded):
    _, enq = seeded
    with DBStore(engine=engine) as store:
        first = store.load(EntityKind.ENQUIRY, enq.id)
        second = store.load(EntityKind.ENQUIRY, enq.id)

        first.status = EnquiryStatus.DEAD
        saved = store.save(EntityKind.ENQUIRY, first)
        assert saved.version == 2

        second.status = EnquiryStatus.BUDGETARY
        with pytest.raises(ConcurrentModification):
            store.save(EntityKind.ENQUIRY, second)

        assert store.load(EntityKind.ENQUIRY, enq.id).status is EnquiryStatus.DEAD


def test_missing_rows(engine):
    with DBStore(engine=engine) as store:
        with pytest.raises(NotFound):
            store.load(EntityKind.ENQUIRY, 99)
        with pytest.raises(NotFound):
            store.save(EntityKind.ENQUIRY, Enquiry(company_id=1, id=99))


def test_find_by_status(engine, seeded):
    with DBStore(engine=engine) as store:
        assert [e.subject for e in store.find_by_status(EntityKind.ENQUIRY, EnquiryStatus.LIVE)] == ["Ladle"]
        assert store.find_by_status(EntityKind.ENQUIRY, EnquiryStatus.WON) == []
        assert len(store) == 2


def test_back_office_over_sqlite(engine, seeded):
    _, enq = seeded
    clock = FixedClock(datetime(2026, 3, 10, 9, 30))
    with DBStore(engine=engine) as store:
        office = BackOffice(store=store, clock=clock, settings=Settings())
        q = office.create_quotation(enq.id, 1200, date(2026, 3, 11), status="LIVE")
        (task,) = office.get_upcoming_tasks(TaskType.QUOTATION)
        assert task.customer_name == "ACME Steel"

        office.update_quotation_status(q.id, "RECEIVED", {"purchase_order_number": "PO-7"})
        assert office.get_upcoming_tasks(TaskType.QUOTATION) == []
        assert office.get_quotation(q.id).purchase_order_number == "PO-7"
