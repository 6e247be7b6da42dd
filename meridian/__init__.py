"""
Meridian
========

Back-office core for tracking customer enquiries, quotations and
communications, and for deriving a prioritised worklist out of them.

Import structure
----------------
`import meridian` is intentionally cheap: only the stdlib-based
sub-modules are imported by default.  SQLModel / FastAPI are only
imported when you explicitly access :pymod:`meridian.db`,
:pymod:`meridian.store_db` or the ``api`` package.

Sub-modules
~~~~~~~~~~~
- :pymod:`meridian.models`        – dataclasses + status enums
- :pymod:`meridian.rules`         – status rule registry (required fields per status)
- :pymod:`meridian.lifecycle`     – transition validator + enquiry / quotation machines
- :pymod:`meridian.scheduler`     – communication creation and rescheduling
- :pymod:`meridian.tasks`         – task derivation engine (the worklist)
- :pymod:`meridian.priority`      – high / medium / low classifier
- :pymod:`meridian.presentation`  – labels, colours and icons for every enum
- :pymod:`meridian.store`         – in-memory entity store
- :pymod:`meridian.service`       – ``BackOffice`` facade used by the API and CLI

Quick start
-----------
>>> from datetime import date
>>> from meridian.models import EnquiryStatus
>>> from meridian.service import BackOffice
>>> office = BackOffice()
>>> acme = office.create_company("ACME Steel")
>>> enq = office.create_enquiry(acme.id, "Furnace relining")
>>> enq = office.update_enquiry_status(enq.id, EnquiryStatus.RCD,
...                                    {"date_of_receipt": date(2026, 5, 1)})
>>> enq.status
<EnquiryStatus.RCD: 'RCD'>

"""

__all__ = [
    "models",
    "rules",
    "lifecycle",
    "scheduler",
    "tasks",
    "priority",
    "presentation",
    "store",
    "service",
]

__version__ = "0.1.0"
