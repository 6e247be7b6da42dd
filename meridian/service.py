"""
meridian.service
================

``BackOffice`` is the single entry point used by the HTTP layer and the
CLI.  It loads records from the store, runs them through the status
machines / scheduler, writes each result back in one save, and rebuilds
the worklist on demand.

All failures surface as :class:`meridian.errors.MeridianError` subclasses;
the store is never written when validation fails.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from .clock import SystemClock
from .errors import ConcurrentModification, InvalidValue, MissingRequiredField
from .lifecycle import EnquiryStatusMachine, QuotationStatusMachine, parse_status
from .models import (
    ACTIVE_QUOTATION_STATUSES,
    Communication,
    Company,
    Enquiry,
    EntityKind,
    Priority,
    Quotation,
    QuotationStatus,
    Task,
    TaskType,
)
from .priority import PriorityClassifier
from .rules import STATUS_ENUMS, as_date, is_blank
from .scheduler import CommunicationScheduler
from .settings import Settings, settings as default_settings
from .store import InMemoryStore
from .tasks import UNKNOWN_CUSTOMER, TaskDerivationEngine, filter_tasks, summarize

logger = logging.getLogger(__name__)


class BackOffice:
    """
    Parameters
    ----------
    store
        Any object with ``add / load / save / all`` (in-memory by default).
    clock
        Source of "today" for priorities and generated numbers.
    settings
        Business-rule settings (priority window, payload strictness).
    """

    def __init__(self, store=None, clock: Optional[SystemClock] = None,
                 settings: Optional[Settings] = None) -> None:
        self.store = store if store is not None else InMemoryStore()
        self.clock = clock or SystemClock()
        self.settings = settings or default_settings
        strict = self.settings.strict_payloads
        self.enquiry_machine = EnquiryStatusMachine(strict_payloads=strict)
        self.quotation_machine = QuotationStatusMachine(strict_payloads=strict)
        self.scheduler = CommunicationScheduler()
        self.task_engine = TaskDerivationEngine(
            PriorityClassifier(self.clock, self.settings.near_term_window_days)
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _load_current(self, kind: EntityKind, id: int, expected_version: Optional[int]):
        entity = self.store.load(kind, id)
        if expected_version is not None and expected_version != entity.version:
            raise ConcurrentModification(kind, id, expected_version, entity.version)
        return entity

    def _next_quotation_number(self) -> str:
        taken = {q.quotation_number for q in self.store.all(EntityKind.QUOTATION)}
        now = self.clock.now()
        serial = int(now.timestamp() * 1000) % 1_000_000
        while True:
            number = f"Q{now:%Y%m}{serial:06d}"
            if number not in taken:
                return number
            serial = (serial + 1) % 1_000_000

    # ------------------------------------------------------------------
    # Creation collaborators
    # ------------------------------------------------------------------
    def create_company(self, name: str) -> Company:
        if is_blank(name):
            raise MissingRequiredField("name")
        return self.store.add(EntityKind.COMPANY, Company(name=name.strip()))

    def create_enquiry(self, company_id: int, subject: str = "") -> Enquiry:
        """New enquiries always start LIVE."""
        self.store.load(EntityKind.COMPANY, company_id)
        enquiry = self.store.add(EntityKind.ENQUIRY, Enquiry(company_id=company_id, subject=subject))
        logger.info(f"Enquiry {enquiry.id} created for company {company_id}")
        return enquiry

    def create_quotation(
        self,
        enquiry_id: int,
        total_value: float = 0.0,
        validity_period: Any = None,
        quotation_number: Optional[str] = None,
        status: Any = QuotationStatus.DRAFT,
    ) -> Quotation:
        """New quotations start DRAFT or LIVE; the number must be unique."""
        self.store.load(EntityKind.ENQUIRY, enquiry_id)
        status = parse_status(EntityKind.QUOTATION, status)
        if status not in ACTIVE_QUOTATION_STATUSES:
            raise InvalidValue("status", "a new quotation must be DRAFT or LIVE")
        if total_value is None or total_value < 0:
            raise InvalidValue("total_value", "must be zero or more")
        expiry: Optional[date] = None
        if not is_blank(validity_period):
            try:
                expiry = as_date(validity_period)
            except (TypeError, ValueError):
                raise InvalidValue("validity_period", "must be a date (YYYY-MM-DD)") from None

        if is_blank(quotation_number):
            quotation_number = self._next_quotation_number()
        else:
            quotation_number = quotation_number.strip()
            if any(q.quotation_number == quotation_number for q in self.store.all(EntityKind.QUOTATION)):
                raise InvalidValue("quotation_number", f"{quotation_number} already exists")

        quotation = self.store.add(EntityKind.QUOTATION, Quotation(
            enquiry_id=enquiry_id,
            quotation_number=quotation_number,
            status=status,
            total_value=float(total_value),
            validity_period=expiry,
        ))
        logger.info(f"Quotation {quotation.quotation_number} ({quotation.id}) created for enquiry {enquiry_id}")
        return quotation

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_enquiry(self, id: int) -> Enquiry:
        return self.store.load(EntityKind.ENQUIRY, id)

    def get_quotation(self, id: int) -> Quotation:
        return self.store.load(EntityKind.QUOTATION, id)

    def get_communication(self, id: int) -> Communication:
        return self.store.load(EntityKind.COMMUNICATION, id)

    def status_counts(self, kind: EntityKind) -> Dict[str, int]:
        """Zero-filled count of records per status."""
        counts = {s.value: 0 for s in STATUS_ENUMS[kind]}
        for entity in self.store.all(kind):
            counts[entity.status.value] += 1
        return counts

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def update_enquiry_status(self, id: int, target: Any,
                              payload: Optional[Mapping[str, Any]] = None,
                              expected_version: Optional[int] = None) -> Enquiry:
        enquiry = self._load_current(EntityKind.ENQUIRY, id, expected_version)
        updated = self.enquiry_machine.apply(enquiry, target, payload, now=self.clock.now())
        return self.store.save(EntityKind.ENQUIRY, updated)

    def update_quotation_status(self, id: int, target: Any,
                                payload: Optional[Mapping[str, Any]] = None,
                                expected_version: Optional[int] = None) -> Quotation:
        quotation = self._load_current(EntityKind.QUOTATION, id, expected_version)
        updated = self.quotation_machine.apply(quotation, target, payload, now=self.clock.now())
        return self.store.save(EntityKind.QUOTATION, updated)

    # ------------------------------------------------------------------
    # Communications
    # ------------------------------------------------------------------
    def create_communication(
        self,
        enquiry_id: int,
        type: Any,
        next_communication_date: Any,
        description: str = "",
        proposed_next_action: Optional[str] = None,
    ) -> Communication:
        communication = self.scheduler.create(
            enquiry_id, type, next_communication_date, description, proposed_next_action
        )
        self.store.load(EntityKind.ENQUIRY, enquiry_id)
        communication = self.store.add(EntityKind.COMMUNICATION, communication)
        logger.info(
            f"Communication {communication.id} logged on enquiry {enquiry_id}, "
            f"follow-up {communication.next_communication_date:%Y-%m-%d}"
        )
        return communication

    def reschedule_communication(self, id: int, new_date: Any, new_time: Optional[str] = None,
                                 reason: Optional[str] = None,
                                 expected_version: Optional[int] = None) -> Communication:
        communication = self._load_current(EntityKind.COMMUNICATION, id, expected_version)
        updated = self.scheduler.reschedule(communication, new_date, new_time, reason)
        return self.store.save(EntityKind.COMMUNICATION, updated)

    # ------------------------------------------------------------------
    # Worklist
    # ------------------------------------------------------------------
    def _customer_names(self) -> Dict[int, str]:
        companies = {c.id: c.name for c in self.store.all(EntityKind.COMPANY)}
        return {
            e.id: companies.get(e.company_id, UNKNOWN_CUSTOMER)
            for e in self.store.all(EntityKind.ENQUIRY)
        }

    def get_upcoming_tasks(self, task_type: Optional[TaskType] = None,
                           priority: Optional[Priority] = None) -> List[Task]:
        """Rebuild the worklist from the current rows; nothing is stored."""
        tasks = self.task_engine.derive(
            self.store.all(EntityKind.QUOTATION),
            self.store.all(EntityKind.COMMUNICATION),
            self._customer_names(),
        )
        return filter_tasks(tasks, task_type, priority)

    def task_summary(self) -> Dict[str, Dict[str, int]]:
        return summarize(self.get_upcoming_tasks())
