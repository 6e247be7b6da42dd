"""
meridian.presentation
=====================

One canonical lookup from every enum the core exposes to the label,
colour and icon a front end should show for it.  Screens ask this module
instead of keeping their own status → colour tables.

The map is keyed by enum class first: the status enums are str-valued, so
``EnquiryStatus.LIVE == QuotationStatus.LIVE`` and a flat dict would mix
them up.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, Type

from .models import (
    CommunicationTaskStatus,
    CommunicationType,
    EnquiryStatus,
    LostReason,
    Priority,
    QuotationStatus,
    TaskType,
)


@dataclass(frozen=True)
class Meta:
    label: str
    color: str
    icon: str


_UNKNOWN = Meta(label="Unknown", color="gray", icon="circle-help")

METADATA: Dict[Type[Enum], Dict[Enum, Meta]] = {
    EnquiryStatus: {
        EnquiryStatus.LIVE:      Meta("Live", "blue", "activity"),
        EnquiryStatus.DEAD:      Meta("Dead", "gray", "circle-slash"),
        EnquiryStatus.RCD:       Meta("Received", "indigo", "inbox"),
        EnquiryStatus.WON:       Meta("Won", "green", "trophy"),
        EnquiryStatus.LOST:      Meta("Lost", "red", "x-circle"),
        EnquiryStatus.BUDGETARY: Meta("Budgetary", "amber", "calculator"),
    },
    QuotationStatus: {
        QuotationStatus.DRAFT:     Meta("Draft", "slate", "file-pen"),
        QuotationStatus.LIVE:      Meta("Live", "blue", "activity"),
        QuotationStatus.WON:       Meta("Won", "green", "trophy"),
        QuotationStatus.LOST:      Meta("Lost", "red", "x-circle"),
        QuotationStatus.BUDGETARY: Meta("Budgetary", "amber", "calculator"),
        QuotationStatus.DEAD:      Meta("Dead", "gray", "circle-slash"),
        QuotationStatus.RECEIVED:  Meta("PO Received", "emerald", "package-check"),
    },
    LostReason: {
        LostReason.PRICE:              Meta("Price", "red", "badge-dollar-sign"),
        LostReason.DELIVERY_SCHEDULE:  Meta("Delivery schedule", "orange", "truck"),
        LostReason.LACK_OF_CONFIDENCE: Meta("Lack of confidence", "yellow", "shield-alert"),
        LostReason.OTHER:              Meta("Other", "gray", "ellipsis"),
    },
    CommunicationType: {
        CommunicationType.TELEPHONIC:      Meta("Phone Call", "blue", "phone"),
        CommunicationType.VIRTUAL_MEETING: Meta("Video Call", "purple", "video"),
        CommunicationType.EMAIL:           Meta("Email", "sky", "mail"),
        CommunicationType.PLANT_VISIT:     Meta("Plant Visit", "orange", "factory"),
        CommunicationType.OFFICE_VISIT:    Meta("Office Visit", "teal", "building"),
    },
    CommunicationTaskStatus: {
        CommunicationTaskStatus.OVERDUE:   Meta("Overdue", "red", "alarm-clock"),
        CommunicationTaskStatus.DUE_TODAY: Meta("Due today", "orange", "clock"),
        CommunicationTaskStatus.SCHEDULED: Meta("Scheduled", "slate", "calendar"),
    },
    TaskType: {
        TaskType.QUOTATION:     Meta("Quotation", "indigo", "file-text"),
        TaskType.COMMUNICATION: Meta("Communication", "blue", "message-square"),
    },
    Priority: {
        Priority.HIGH:   Meta("High", "red", "arrow-up"),
        Priority.MEDIUM: Meta("Medium", "yellow", "minus"),
        Priority.LOW:    Meta("Low", "green", "arrow-down"),
    },
}

_GROUPS: Dict[str, Type[Enum]] = {
    "enquiry_status": EnquiryStatus,
    "quotation_status": QuotationStatus,
    "lost_reason": LostReason,
    "communication_type": CommunicationType,
    "communication_task_status": CommunicationTaskStatus,
    "task_type": TaskType,
    "priority": Priority,
}


def meta_for(member: Enum) -> Meta:
    """Return display metadata for an enum member (never raises)."""
    return METADATA.get(type(member), {}).get(member, _UNKNOWN)


def label_for(member: Enum) -> str:
    return meta_for(member).label


def as_json() -> Dict[str, Dict[str, dict]]:
    """Whole map grouped by enum, keyed by member value; served at ``/meta``."""
    return {
        group: {m.value: asdict(meta_for(m)) for m in enum}
        for group, enum in _GROUPS.items()
    }
