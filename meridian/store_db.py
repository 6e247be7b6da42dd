"""
meridian.store_db
=================

SQLite-backed implementation of the entity store surface.

This adapter wraps the CRUD helpers in :pymod:`meridian.db` so that any
code expecting the in-memory :class:`~meridian.store.InMemoryStore` can
switch to a persistent store without changing its calls.
"""

from __future__ import annotations

from typing import Any, Iterator, List

from sqlalchemy.engine import Engine
from sqlmodel import Session

from meridian.db import SessionLocal, all_entities, get_entity, insert_entity, update_entity
from meridian.errors import NotFound
from meridian.models import EntityKind


class DBStore:
    """
    Drop-in replacement backed by SQLite.

    Methods mirror the in-memory store:
    * add(kind, ent)
    * load(kind, id)
    * save(kind, ent)
    * all(kind) / find_by_status(kind, status)
    * iteration / len()
    """

    def __init__(self, session: Session | None = None, engine: Engine | None = None) -> None:
        if session is None and engine is not None:
            session = Session(engine)
        self._session: Session = session or SessionLocal()

    # ------------------------------------------------------------------ CRUD
    def add(self, kind: EntityKind, ent: Any) -> Any:
        return insert_entity(self._session, kind, ent)

    def load(self, kind: EntityKind, id: int) -> Any:
        ent = get_entity(self._session, kind, id)
        if ent is None:
            raise NotFound(kind, id)
        return ent

    def save(self, kind: EntityKind, ent: Any) -> Any:
        return update_entity(self._session, kind, ent)

    def all(self, kind: EntityKind) -> List[Any]:
        return all_entities(self._session, kind)

    def find_by_status(self, kind: EntityKind, status: Any) -> List[Any]:
        return [e for e in self.all(kind) if e.status == status]

    # ------------------------------------------------------ dunder helpers
    def __iter__(self) -> Iterator[Any]:
        for kind in EntityKind:
            yield from self.all(kind)

    def __len__(self) -> int:
        return sum(len(self.all(kind)) for kind in EntityKind)

    # ----------------------------------------------------- context manager
    def __enter__(self) -> "DBStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._session.close()
