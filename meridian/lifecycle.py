"""
meridian.lifecycle
==================

Transition validator and status machines for enquiries and quotations.

There is deliberately no transition graph: any status may move to any
other (a WON enquiry can be corrected back to LIVE) provided the payload
carries what :pydata:`meridian.rules.RULES` demands for the target status.

Machines never mutate their input.  :pymeth:`StatusMachine.apply` returns a
new record with the status *and* its auxiliary fields already merged, so
the caller persists one fully-formed entity in a single write.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union

from .errors import IllegalPayload, InvalidValue, MissingRequiredField
from .models import Enquiry, EnquiryStatus, EntityKind, Quotation, QuotationStatus
from .rules import STATUS_ENUMS, is_blank, requirements_for

logger = logging.getLogger(__name__)


def parse_status(kind: EntityKind, value: Any):
    """Return the status enum member for *value* or raise InvalidValue."""
    enum = STATUS_ENUMS[kind]
    try:
        return enum(value)
    except ValueError:
        allowed = ", ".join(s.value for s in enum)
        raise InvalidValue("status", f"must be one of {allowed}") from None


def validate_transition(
    kind: EntityKind,
    current: Any,
    target: Any,
    payload: Optional[Mapping[str, Any]] = None,
    *,
    strict: bool = False,
) -> Dict[str, Any]:
    """
    Check *payload* against the registry entry for ``(kind, target)``.

    Returns the coerced values keyed by payload field name.  The first
    failing rule raises :class:`MissingRequiredField` or
    :class:`InvalidValue`.  Keys the target status does not understand are
    rejected with :class:`IllegalPayload` when *strict*, otherwise dropped
    with a warning.

    Examples
    --------
    >>> validate_transition(EntityKind.ENQUIRY, "LIVE", "RCD", {})
    Traceback (most recent call last):
        ...
    meridian.errors.MissingRequiredField: date_of_receipt is required
    """
    payload = dict(payload or {})
    target = parse_status(kind, target)
    rules = requirements_for(kind, target)

    unknown = set(payload) - {rule.name for rule in rules}
    if unknown:
        if strict:
            raise IllegalPayload(unknown, target.value)
        logger.warning(
            f"Ignoring fields not applicable to {kind.name} {target.value}: {', '.join(sorted(unknown))}"
        )

    values: Dict[str, Any] = {}
    for rule in rules:
        raw = payload.get(rule.name)
        if is_blank(raw):
            if rule.required:
                raise MissingRequiredField(rule.name)
            continue
        try:
            value = rule.coerce(raw)
        except (TypeError, ValueError):
            raise InvalidValue(rule.name, rule.reason) from None
        if not rule.predicate(value):
            raise InvalidValue(rule.name, rule.reason)
        values[rule.name] = value

    logger.debug(f"{kind.name} transition {current} → {target.value} accepted")
    return values


class StatusMachine:
    """
    Applies validated transitions for one entity kind.

    Subclasses only set :pyattr:`kind`; the requirements live in the
    registry.
    """
    kind: EntityKind

    def __init__(self, strict_payloads: bool = False) -> None:
        self.strict_payloads = strict_payloads

    def apply(self, entity, target: Any, payload: Optional[Mapping[str, Any]] = None,
              now: Optional[datetime] = None):
        """
        Return a copy of *entity* moved to *target*.

        Only the fields named by the target's rules are written, and only
        when supplied.  Data captured by earlier transitions is kept
        (moving WON → LIVE leaves the purchase order number in place).
        """
        target = parse_status(self.kind, target)
        values = validate_transition(
            self.kind, entity.status, target, payload, strict=self.strict_payloads
        )
        changes = {
            rule.target_attr: values[rule.name]
            for rule in requirements_for(self.kind, target)
            if rule.name in values
        }
        updated = replace(entity, status=target, updated_at=now or datetime.now(), **changes)
        logger.info(f"{self.kind.name} {entity.id}: {entity.status} → {target}")
        return updated


class EnquiryStatusMachine(StatusMachine):
    kind = EntityKind.ENQUIRY

    def apply(self, entity: Enquiry, target: Union[EnquiryStatus, str],
              payload: Optional[Mapping[str, Any]] = None,
              now: Optional[datetime] = None) -> Enquiry:
        return super().apply(entity, target, payload, now)


class QuotationStatusMachine(StatusMachine):
    kind = EntityKind.QUOTATION

    def apply(self, entity: Quotation, target: Union[QuotationStatus, str],
              payload: Optional[Mapping[str, Any]] = None,
              now: Optional[datetime] = None) -> Quotation:
        return super().apply(entity, target, payload, now)


_MACHINES = {
    Enquiry: EnquiryStatusMachine,
    Quotation: QuotationStatusMachine,
}


def advance_status(entity: Union[Enquiry, Quotation], target: Any,
                   payload: Optional[Mapping[str, Any]] = None, *,
                   strict: bool = False):
    """
    Convenience wrapper picking the right machine for *entity*.

    Examples
    --------
    >>> q = Quotation(enquiry_id=1, status=QuotationStatus.LIVE)
    >>> advance_status(q, QuotationStatus.LOST, {"lost_reason": "PRICE"}).lost_reason
    <LostReason.PRICE: 'PRICE'>
    """
    try:
        machine = _MACHINES[type(entity)](strict_payloads=strict)
    except KeyError:
        raise TypeError(f"no status machine for {type(entity).__name__}") from None
    return machine.apply(entity, target, payload)
