"""Column helpers shared by every table."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime


def new_id() -> str:
    """Return a fresh identifier for a row."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)
