# File: backend/app/db/maintenance.py
# Version: v0.3.0
"""
Schema maintenance helpers (non-destructive).

- ensure_schema(engine): creates only tables that are missing.
- Imports `backend.app.db.models` so every ORM model is registered on
  Base.metadata before inspection.

Safe to run multiple times; it never drops or alters existing tables.
"""
from __future__ import annotations

import logging
from typing import List

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

import backend.app.db.models  # noqa: F401
from backend.app.db.base import Base

logger = logging.getLogger(__name__)


def ensure_schema(engine: Engine) -> List[str]:
    """
    Create any missing tables declared on Base.metadata.

    Returns a list of human-readable action strings (e.g., "created table primer_runs").
    """
    inspector = inspect(engine)
    existing = set(inspector.get_table_names())
    defined = set(Base.metadata.tables.keys())

    missing = sorted(defined - existing)
    actions: List[str] = []

    # Parents before children so foreign keys resolve
    for table in Base.metadata.sorted_tables:
        if table.name in missing:
            table.create(bind=engine, checkfirst=True)
            actions.append(f"created table {table.name}")

    if not actions:
        actions.append("all tables present")
    for a in actions:
        logger.info("schema: %s", a)
    return actions
