"""
Pytest configuration: make sure `import meridian` / `import api` work
regardless of where pytest is invoked, and provide a back office wired to
the in-memory store and a pinned clock.
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from meridian.clock import FixedClock  # noqa: E402
from meridian.service import BackOffice  # noqa: E402
from meridian.settings import Settings  # noqa: E402
from meridian.store import InMemoryStore  # noqa: E402

NOW = datetime(2026, 3, 10, 9, 30)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def office(clock):
    return BackOffice(store=InMemoryStore(), clock=clock,
                      settings=Settings(near_term_window_days=7, strict_payloads=False))


@pytest.fixture
def enquiry(office):
    """A LIVE enquiry owned by 'ACME Steel'."""
    acme = office.create_company("ACME Steel")
    return office.create_enquiry(acme.id, "Ladle relining")
