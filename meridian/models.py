"""
meridian.models
===============

Dataclasses and enums representing the records tracked by the back office:
companies, enquiries, quotations, communications and the derived tasks.
These objects are intentionally lightweight; they carry **no**
external-library dependencies so that importing `meridian` stays fast.

Ids are assigned by the entity store on first ``add``; an unsaved record
has ``id=None``.  ``version`` is bumped by the store on every successful
save and is used for optimistic concurrency checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class _NamedEnum(str, Enum):
    """String-valued enum whose value is its own name."""

    def __str__(self) -> str:        # nicer REPL display
        return self.name


class EntityKind(_NamedEnum):
    COMPANY = "COMPANY"
    ENQUIRY = "ENQUIRY"
    QUOTATION = "QUOTATION"
    COMMUNICATION = "COMMUNICATION"


class EnquiryStatus(_NamedEnum):
    """Legal life-cycle states for an enquiry."""
    LIVE = "LIVE"
    DEAD = "DEAD"
    RCD = "RCD"
    WON = "WON"
    LOST = "LOST"
    BUDGETARY = "BUDGETARY"


class QuotationStatus(_NamedEnum):
    """Legal life-cycle states for a quotation."""
    DRAFT = "DRAFT"
    LIVE = "LIVE"
    WON = "WON"
    LOST = "LOST"
    BUDGETARY = "BUDGETARY"
    DEAD = "DEAD"
    RECEIVED = "RECEIVED"


# Quotations in these states still need work and show up as tasks.
ACTIVE_QUOTATION_STATUSES = frozenset({QuotationStatus.DRAFT, QuotationStatus.LIVE})


class LostReason(_NamedEnum):
    PRICE = "PRICE"
    DELIVERY_SCHEDULE = "DELIVERY_SCHEDULE"
    LACK_OF_CONFIDENCE = "LACK_OF_CONFIDENCE"
    OTHER = "OTHER"


class CommunicationType(_NamedEnum):
    TELEPHONIC = "TELEPHONIC"
    VIRTUAL_MEETING = "VIRTUAL_MEETING"
    EMAIL = "EMAIL"
    PLANT_VISIT = "PLANT_VISIT"
    OFFICE_VISIT = "OFFICE_VISIT"


class TaskType(_NamedEnum):
    QUOTATION = "QUOTATION"
    COMMUNICATION = "COMMUNICATION"


class Priority(_NamedEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CommunicationTaskStatus(_NamedEnum):
    """Implicit state of a scheduled follow-up, relative to today."""
    OVERDUE = "OVERDUE"
    DUE_TODAY = "DUE_TODAY"
    SCHEDULED = "SCHEDULED"


@dataclass
class Company:
    """A customer organisation; owner of enquiries."""
    name: str
    id: Optional[int] = None
    version: int = 1


@dataclass
class Enquiry:
    """
    Customer-initiated request tracked from first contact to closure.

    Parameters
    ----------
    company_id : int
        Owning company.
    subject : str
        Short description of what the customer asked for.
    status : EnquiryStatus, default=LIVE
        Current life-cycle phase.
    date_of_receipt : datetime.date | None
        Set when the enquiry reaches RCD.
    oa_number : str | None
        Receipt / order acknowledgement number, optionally captured at RCD.
    purchase_order_number, po_value, po_date
        Purchase order data, set when the enquiry is WON.
    """
    company_id: int
    subject: str = ""
    status: EnquiryStatus = EnquiryStatus.LIVE
    date_of_receipt: Optional[date] = None
    oa_number: Optional[str] = None
    purchase_order_number: Optional[str] = None
    po_value: Optional[float] = None
    po_date: Optional[date] = None
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    version: int = 1


@dataclass
class Quotation:
    """
    Priced proposal tied to an enquiry.

    ``validity_period`` is the date the offer expires; while the quotation
    is DRAFT or LIVE that date is the due date of its task.
    """
    enquiry_id: int
    quotation_number: str = ""
    status: QuotationStatus = QuotationStatus.DRAFT
    total_value: float = 0.0
    validity_period: Optional[date] = None
    lost_reason: Optional[LostReason] = None
    purchase_order_number: Optional[str] = None
    po_value: Optional[float] = None
    po_date: Optional[date] = None
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    version: int = 1

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_QUOTATION_STATUSES


@dataclass
class Communication:
    """A logged interaction carrying a mandatory follow-up date."""
    enquiry_id: int
    type: CommunicationType
    next_communication_date: datetime
    description: str = ""
    proposed_next_action: Optional[str] = None
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)
    version: int = 1


@dataclass(frozen=True)
class Task:
    """
    Derived work item.  Never persisted; rebuilt on every read by
    :pymeth:`meridian.tasks.TaskDerivationEngine.derive`.
    """
    type: TaskType
    id: int
    due_date: datetime
    customer_name: str
    task_description: str
    status: str
    priority: Priority = Priority.LOW

    def sort_key(self) -> tuple:
        """Due date ascending, ties broken by type then source id."""
        return (self.due_date, self.type.value, self.id)
