"""
meridian.db
===========

SQLite persistence layer for Meridian.

This module exposes:

* ``engine`` – a global SQLModel engine pointing at *meridian.db*
* ``SessionLocal`` – a session factory used via ``with SessionLocal() as s:``
* one table per stored dataclass (``CompanyDB``, ``EnquiryDB``,
  ``QuotationDB``, ``CommunicationDB``) with ``from_entity`` / ``to_entity``
  converters
* ``create_all()`` – helper to create tables at first run
"""

from __future__ import annotations

from dataclasses import asdict, fields
from datetime import date, datetime
from typing import Any, ClassVar, Dict, List, Optional, Type

from sqlalchemy import DateTime, update
from sqlmodel import Field, Session, SQLModel, create_engine, select

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
)
from meridian.settings import DB_ECHO, DB_URL


# ---------------------------------------------------------------------------
# Engine (SQLite file lives in project root unless MERIDIAN_DB_FILE says otherwise)
# ---------------------------------------------------------------------------
engine = create_engine(DB_URL, echo=DB_ECHO)


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
def SessionLocal() -> Session:  # noqa: N802 (factory camel-case for consistency with FastAPI docs)
    """Return a new Session bound to the global engine."""
    return Session(engine)


# ---------------------------------------------------------------------------
# ORM models that mirror meridian.models
# ---------------------------------------------------------------------------
class _EntityRow:
    """
    Converters shared by every table; field names match the dataclass.
    Timestamps are stored as naive local time (plain ``DateTime`` columns).
    """
    entity_cls: ClassVar[type]

    @classmethod
    def from_entity(cls, ent: Any):
        """Create a DB row from an in-memory entity."""
        return cls(**asdict(ent))

    def to_entity(self) -> Any:
        """Convert the DB row back into the plain dataclass."""
        return self.entity_cls(**{f.name: getattr(self, f.name) for f in fields(self.entity_cls)})


class CompanyDB(_EntityRow, SQLModel, table=True):
    entity_cls: ClassVar[type] = Company

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    version: int = 1


class EnquiryDB(_EntityRow, SQLModel, table=True):
    entity_cls: ClassVar[type] = Enquiry

    id: Optional[int] = Field(default=None, primary_key=True)
    company_id: int = Field(foreign_key="companydb.id", index=True)
    subject: str = ""
    status: EnquiryStatus = EnquiryStatus.LIVE
    date_of_receipt: Optional[date] = None
    oa_number: Optional[str] = None
    purchase_order_number: Optional[str] = None
    po_value: Optional[float] = None
    po_date: Optional[date] = None
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
    version: int = 1


class QuotationDB(_EntityRow, SQLModel, table=True):
    entity_cls: ClassVar[type] = Quotation

    id: Optional[int] = Field(default=None, primary_key=True)
    enquiry_id: int = Field(foreign_key="enquirydb.id", index=True)
    quotation_number: str = Field(default="", index=True, unique=True)
    status: QuotationStatus = QuotationStatus.DRAFT
    total_value: float = 0.0
    validity_period: Optional[date] = None
    lost_reason: Optional[LostReason] = None
    purchase_order_number: Optional[str] = None
    po_value: Optional[float] = None
    po_date: Optional[date] = None
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
    version: int = 1


class CommunicationDB(_EntityRow, SQLModel, table=True):
    entity_cls: ClassVar[type] = Communication

    id: Optional[int] = Field(default=None, primary_key=True)
    enquiry_id: int = Field(foreign_key="enquirydb.id", index=True)
    type: CommunicationType
    next_communication_date: datetime = Field(index=True, sa_type=DateTime)
    description: str = ""
    proposed_next_action: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
    version: int = 1


TABLES: Dict[EntityKind, Type[SQLModel]] = {
    EntityKind.COMPANY: CompanyDB,
    EntityKind.ENQUIRY: EnquiryDB,
    EntityKind.QUOTATION: QuotationDB,
    EntityKind.COMMUNICATION: CommunicationDB,
}


# ---------------------------------------------------------------------------
# Convenience CRUD helpers
# ---------------------------------------------------------------------------
def insert_entity(s: Session, kind: EntityKind, ent: Any) -> Any:
    """Insert a new row; returns the entity with its assigned id."""
    row = TABLES[kind].from_entity(ent)
    row.id = None
    row.version = 1
    s.add(row)
    s.commit()
    s.refresh(row)
    return row.to_entity()


def get_entity(s: Session, kind: EntityKind, id: int) -> Any | None:
    """Return an entity by id or *None* if missing."""
    row = s.get(TABLES[kind], id)
    return row.to_entity() if row else None


def update_entity(s: Session, kind: EntityKind, ent: Any) -> Any:
    """
    Compare-and-swap write: the row is only updated when its stored
    version equals ``ent.version``.  Returns the entity at its new version.
    """
    table = TABLES[kind]
    values = asdict(ent)
    values.pop("id")
    values["version"] = ent.version + 1
    result = s.execute(
        update(table)
        .where(table.id == ent.id, table.version == ent.version)
        .values(**values)
    )
    if result.rowcount == 0:
        s.rollback()
        current = s.get(table, ent.id)
        if current is None:
            raise NotFound(kind, ent.id)
        raise ConcurrentModification(kind, ent.id, ent.version, current.version)
    s.commit()
    s.expire_all()
    return get_entity(s, kind, ent.id)


def all_entities(s: Session, kind: EntityKind) -> List[Any]:
    """Return every row of *kind*, ordered by id."""
    table = TABLES[kind]
    rows = s.exec(select(table).order_by(table.id)).all()
    return [row.to_entity() for row in rows]


# ---------------------------------------------------------------------------
# Utility: create tables
# ---------------------------------------------------------------------------
def create_all(bind=None) -> None:
    """Create all tables (safe if they already exist)."""
    SQLModel.metadata.create_all(bind or engine)


# ---------------------------------------------------------------------------
# Lightweight CLI
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    """
    Quick bootstrap helper.

    Examples
    --------
    $ python -m meridian.db --create        # first-time table creation
    """
    import argparse

    parser = argparse.ArgumentParser(prog="python -m meridian.db", description="Meridian DB utilities")
    parser.add_argument("--create", action="store_true", help="create tables")
    args = parser.parse_args()

    if args.create:
        create_all()
        print("✅ meridian.db schema initialised")
