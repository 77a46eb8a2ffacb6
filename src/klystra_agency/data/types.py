"""Column types shared by the ORM models."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, Text
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator

logger = logging.getLogger(__name__)


class JSONText(TypeDecorator[Any]):
    """Store a list or mapping as JSON text.

    This is the only place where the serialized-list/map columns are encoded
    and decoded. Rows whose text is not valid JSON decode to ``empty()``
    (``None`` when no factory is given) and a warning is logged.
    """

    impl = Text
    cache_ok = True

    def __init__(self, empty: Callable[[], Any] | None = None) -> None:
        super().__init__()
        self.empty = empty

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return None
        return json.dumps(value, ensure_ascii=False)

    def process_result_value(self, value: str | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        try:
            return json.loads(value)
        except ValueError:
            logger.warning("Discarding malformed JSON column value: %.80r", value)
            return self.empty() if self.empty is not None else None


class UTCDateTime(TypeDecorator[datetime]):
    """Timestamp stored as naive UTC and always read back timezone-aware.

    SQLite keeps no offset, so values are converted to UTC before binding
    and tagged with UTC again on load.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)
