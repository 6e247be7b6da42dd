"""
meridian.rules
==============

Status rule registry.

A declarative table mapping ``(entity kind, target status)`` to the
auxiliary fields a transition into that status must (or may) carry.
Each field has a coercer (turns wire values such as ISO date strings into
Python objects) and a predicate the coerced value must satisfy.

The table is exhaustive over every enquiry and quotation status; a status
with no extra data maps to an empty tuple.  Adding a status or a
requirement is an edit to :pydata:`RULES` only; the validator and the
state machines read nothing else.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Callable, Dict, Tuple, Type

from .models import EnquiryStatus, EntityKind, LostReason, QuotationStatus


# ---------------------------------------------------------------------
# Coercers: raise ValueError / TypeError on malformed input
# ---------------------------------------------------------------------
def as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"expected a date, got {type(value).__name__}")


def as_text(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected text, got {type(value).__name__}")
    return value.strip()


def as_number(value: Any) -> float:
    # bool is an int subclass; True is not a purchase order value
    if isinstance(value, bool):
        raise TypeError("expected a number, got bool")
    return float(value)


def as_lost_reason(value: Any) -> LostReason:
    return LostReason(value)


def _always(_value: Any) -> bool:
    return True


def _positive(value: float) -> bool:
    return math.isfinite(value) and value > 0


def is_blank(value: Any) -> bool:
    """``None`` and empty / whitespace-only strings count as absent."""
    return value is None or (isinstance(value, str) and not value.strip())


# ---------------------------------------------------------------------
# Field rule
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class FieldRule:
    """
    One auxiliary field of a transition payload.

    Parameters
    ----------
    name : str
        Key expected in the payload.
    coerce : callable
        Converts the raw payload value; a raised ValueError / TypeError
        becomes an ``InvalidValue`` error.
    predicate : callable
        Must return True for the coerced value.
    reason : str
        Human-readable explanation used when *coerce* or *predicate* fails.
    required : bool
        Whether the field must be present for the transition.
    attr : str | None
        Entity attribute the value is written to (defaults to *name*).
    """
    name: str
    coerce: Callable[[Any], Any]
    predicate: Callable[[Any], bool] = _always
    reason: str = "invalid value"
    required: bool = True
    attr: str | None = None

    @property
    def target_attr(self) -> str:
        return self.attr or self.name

    def optional(self) -> "FieldRule":
        return replace(self, required=False)


DATE_OF_RECEIPT = FieldRule("date_of_receipt", as_date, reason="must be a date (YYYY-MM-DD)")
RECEIPT_NUMBER = FieldRule("receipt_number", as_text, reason="must be text",
                           required=False, attr="oa_number")
PURCHASE_ORDER_NUMBER = FieldRule("purchase_order_number", as_text, reason="must be text")
PO_VALUE = FieldRule("po_value", as_number, _positive, reason="must be a finite number greater than 0")
PO_DATE = FieldRule("po_date", as_date, reason="must be a date (YYYY-MM-DD)")
LOST_REASON = FieldRule(
    "lost_reason",
    as_lost_reason,
    reason="must be one of " + ", ".join(r.value for r in LostReason),
)


# ---------------------------------------------------------------------
# Registry: (entity kind, target status) → field rules
# ---------------------------------------------------------------------
RULES: Dict[Tuple[EntityKind, Any], Tuple[FieldRule, ...]] = {
    (EntityKind.ENQUIRY, EnquiryStatus.LIVE):          (),
    (EntityKind.ENQUIRY, EnquiryStatus.DEAD):          (),
    (EntityKind.ENQUIRY, EnquiryStatus.RCD):           (DATE_OF_RECEIPT, RECEIPT_NUMBER),
    (EntityKind.ENQUIRY, EnquiryStatus.WON):           (PURCHASE_ORDER_NUMBER, PO_VALUE, PO_DATE),
    (EntityKind.ENQUIRY, EnquiryStatus.LOST):          (),
    (EntityKind.ENQUIRY, EnquiryStatus.BUDGETARY):     (),

    (EntityKind.QUOTATION, QuotationStatus.DRAFT):     (),
    (EntityKind.QUOTATION, QuotationStatus.LIVE):      (),
    (EntityKind.QUOTATION, QuotationStatus.WON):       (PURCHASE_ORDER_NUMBER.optional(),
                                                        PO_VALUE.optional(),
                                                        PO_DATE.optional()),
    (EntityKind.QUOTATION, QuotationStatus.LOST):      (LOST_REASON,),
    (EntityKind.QUOTATION, QuotationStatus.BUDGETARY): (),
    (EntityKind.QUOTATION, QuotationStatus.DEAD):      (),
    (EntityKind.QUOTATION, QuotationStatus.RECEIVED):  (PURCHASE_ORDER_NUMBER,
                                                        PO_VALUE.optional(),
                                                        PO_DATE.optional()),
}

STATUS_ENUMS: Dict[EntityKind, Type] = {
    EntityKind.ENQUIRY: EnquiryStatus,
    EntityKind.QUOTATION: QuotationStatus,
}


def requirements_for(kind: EntityKind, status: Any) -> Tuple[FieldRule, ...]:
    """Return the field rules for a transition of *kind* into *status*."""
    return RULES[(kind, STATUS_ENUMS[kind](status))]


def applicable_fields(kind: EntityKind, status: Any) -> frozenset[str]:
    """Names of every payload key the target status understands."""
    return frozenset(rule.name for rule in requirements_for(kind, status))


def _check_exhaustive() -> None:
    for kind, enum in STATUS_ENUMS.items():
        missing = [s.name for s in enum if (kind, s) not in RULES]
        if missing:
            raise RuntimeError(f"no status rule for {kind.name}: {', '.join(missing)}")


_check_exhaustive()
