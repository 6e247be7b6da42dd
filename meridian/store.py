"""
meridian.store
==============

An in-memory entity store keyed by ``(kind, id)``.

This module is intentionally simple (only the standard library) so that
the core can be unit-tested without a database.  :pymod:`meridian.store_db`
offers the same surface on top of SQLite.

Every write goes through an optimistic version check: ``save`` refuses an
entity whose ``version`` no longer matches the stored row.
"""

from __future__ import annotations

from dataclasses import replace
from itertools import count
from typing import Any, Dict, Iterator, List

from .errors import ConcurrentModification, NotFound
from .models import EntityKind


class InMemoryStore:
    """
    Dictionary-backed store.

    Example
    -------
    >>> from meridian.models import Company
    >>> store = InMemoryStore()
    >>> acme = store.add(EntityKind.COMPANY, Company("ACME"))
    >>> store.load(EntityKind.COMPANY, acme.id).name
    'ACME'
    """

    def __init__(self) -> None:
        self._rows: Dict[EntityKind, Dict[int, Any]] = {k: {} for k in EntityKind}
        self._ids = {k: count(1) for k in EntityKind}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def add(self, kind: EntityKind, entity: Any) -> Any:
        """Insert a new entity; returns a copy carrying its id."""
        stored = replace(entity, id=next(self._ids[kind]), version=1)
        self._rows[kind][stored.id] = stored
        return replace(stored)

    def load(self, kind: EntityKind, id: int) -> Any:
        """Retrieve by id (raise NotFound if not present)."""
        try:
            return replace(self._rows[kind][id])
        except KeyError:
            raise NotFound(kind, id) from None

    def save(self, kind: EntityKind, entity: Any) -> Any:
        """Overwrite an existing entity if its version is current."""
        current = self._rows[kind].get(entity.id)
        if current is None:
            raise NotFound(kind, entity.id)
        if current.version != entity.version:
            raise ConcurrentModification(kind, entity.id, entity.version, current.version)
        stored = replace(entity, version=entity.version + 1)
        self._rows[kind][stored.id] = stored
        return replace(stored)

    def all(self, kind: EntityKind) -> List[Any]:
        return [replace(e) for _, e in sorted(self._rows[kind].items())]

    def find_by_status(self, kind: EntityKind, status: Any) -> List[Any]:
        """Return all entities of *kind* currently at *status*."""
        return [e for e in self.all(kind) if e.status == status]

    # ------------------------------------------------------------------
    # Dunder helpers for convenience
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[Any]:
        for kind in EntityKind:
            yield from self.all(kind)

    def __len__(self) -> int:
        return sum(len(rows) for rows in self._rows.values())
