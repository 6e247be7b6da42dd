"""
meridian.settings
=================

Configuration settings for the Meridian back office.

This module provides centralized configuration options that can be used
across the application.  It includes default values that can be
overridden via environment variables (or a ``.env`` file).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

# ---------------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# Database settings
# ---------------------------------------------------------------------------
DB_FILE = os.environ.get("MERIDIAN_DB_FILE", BASE_DIR / "meridian.db")
DB_URL = f"sqlite:///{DB_FILE}"
DB_ECHO = os.environ.get("MERIDIAN_DB_ECHO", "False").lower() == "true"

# API settings
# ---------------------------------------------------------------------------
API_HOST = os.environ.get("MERIDIAN_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("MERIDIAN_API_PORT", "8000"))
API_DEBUG = os.environ.get("MERIDIAN_API_DEBUG", "False").lower() == "true"


# ---------------------------------------------------------------------------
# Pydantic settings model for the business rules
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Tunable business rules, loaded from ``MERIDIAN_*`` environment variables."""

    near_term_window_days: int = Field(
        7, ge=0, description="Tasks due within this many days (and not overdue) are medium priority"
    )
    strict_payloads: bool = Field(
        False,
        description="Reject status payloads carrying fields the target status does not use "
                    "(otherwise they are dropped with a warning)",
    )
    cors_origins: List[str] = Field(
        default=[
            "http://localhost:5173",    # Vite dev server default port
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="Origins allowed to call the API from a browser",
    )

    class Config:
        """Configuration for the settings model."""
        env_prefix = "MERIDIAN_"
        env_file = ".env"  # load from .env file if present
        case_sensitive = False
        extra = "ignore"


# Initialize settings
settings = Settings()
