"""
meridian.errors
===============

Exception hierarchy raised by the core.  Every error carries a short
machine-readable ``code`` and a ``details()`` mapping so the HTTP layer can
point the user at the exact field that needs fixing.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional


class MeridianError(Exception):
    """Base exception for all back-office errors."""
    code = "error"

    def details(self) -> Dict[str, Any]:
        return {}


class TransitionError(MeridianError):
    """A status change or creation payload was rejected."""
    code = "transition_error"


class MissingRequiredField(TransitionError):
    """A status-specific mandatory field was absent or empty."""
    code = "missing_required_field"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is required")

    def details(self) -> Dict[str, Any]:
        return {"field": self.field}


class InvalidValue(TransitionError):
    """A field was present but failed its predicate."""
    code = "invalid_value"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")

    def details(self) -> Dict[str, Any]:
        return {"field": self.field, "reason": self.reason}


class IllegalPayload(TransitionError):
    """Payload carries fields that do not apply to the target status."""
    code = "illegal_payload"

    def __init__(self, fields: Iterable[str], target: Optional[str] = None):
        self.fields = sorted(fields)
        self.target = target
        where = f" for {target}" if target else ""
        super().__init__(f"fields not applicable{where}: {', '.join(self.fields)}")

    def details(self) -> Dict[str, Any]:
        return {"fields": self.fields}


class NotFound(MeridianError):
    """The referenced record does not exist.  Not retryable."""
    code = "not_found"

    def __init__(self, entity_kind: Any, id: Any):
        self.entity_kind = str(entity_kind)
        self.id = id
        super().__init__(f"{self.entity_kind} {id} not found")

    def details(self) -> Dict[str, Any]:
        return {"entity_kind": self.entity_kind, "id": self.id}


class ConcurrentModification(MeridianError):
    """The record changed since the caller loaded it."""
    code = "concurrent_modification"

    def __init__(self, entity_kind: Any, id: Any, expected: int, actual: int):
        self.entity_kind = str(entity_kind)
        self.id = id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{self.entity_kind} {id} is at version {actual}, expected {expected}"
        )

    def details(self) -> Dict[str, Any]:
        return {
            "entity_kind": self.entity_kind,
            "id": self.id,
            "expected_version": self.expected,
            "actual_version": self.actual,
        }
