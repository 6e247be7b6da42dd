"""
api.deps
========

FastAPI dependency providers.

`get_store` yields a fresh **DBStore** per request (one SQLModel session,
closed when the response is sent) and `get_office` wraps it in the
``BackOffice`` service.  Tests override `get_office` to run against the
in-memory store with a pinned clock.
"""

from functools import lru_cache
from typing import Iterator

from fastapi import Depends

from meridian.service import BackOffice
from meridian.settings import Settings, settings
from meridian.store_db import DBStore


@lru_cache
def get_settings() -> Settings:
    """Return application settings."""
    return settings


def get_store() -> Iterator[DBStore]:
    """Request-scoped SQLite store."""
    with DBStore() as store:
        yield store


def get_office(
    store: DBStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> BackOffice:
    """Back-office service bound to this request's store."""
    return BackOffice(store=store, settings=settings)
