"""Repository over the embedded database.

Every public method opens its own session and commits a single unit of
work, so each operation is atomic on its own and no transaction spans two
calls. Missing rows are reported as ``None`` / ``False`` rather than raised.
Storage failures are logged with full detail and re-raised as
``InternalError``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from sqlalchemy import delete, literal_column, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from klystra_agency.data.db import Base, Database
from klystra_agency.data.models import (
    ContactMessage,
    SocialProject,
    User,
    VideoProject,
    WebsiteProject,
)
from klystra_agency.errors import ConflictError, InternalError

logger = logging.getLogger(__name__)

__all__ = ["EntityType", "Repository"]


class EntityType(StrEnum):
    """Entities managed through the generic CRUD operations."""

    CONTACT_MESSAGE = "contact_message"
    WEBSITE_PROJECT = "website"
    VIDEO_PROJECT = "video"
    SOCIAL_PROJECT = "social"


_MODELS: dict[EntityType, type[Base]] = {
    EntityType.CONTACT_MESSAGE: ContactMessage,
    EntityType.WEBSITE_PROJECT: WebsiteProject,
    EntityType.VIDEO_PROJECT: VideoProject,
    EntityType.SOCIAL_PROJECT: SocialProject,
}

# Server-generated columns a caller can never set.
_PROTECTED_FIELDS = frozenset({"id", "created_at"})


class Repository:
    """Get/list/create/update/delete for every entity, plus user lookups."""

    def __init__(self, database: Database) -> None:
        self.database = database

    # ------------------------------------------------------------------
    # Generic entity operations
    # ------------------------------------------------------------------

    def get(self, entity_type: EntityType, entity_id: str) -> Any | None:
        """Return the row with ``entity_id`` or None when it does not exist."""
        model = _MODELS[entity_type]
        try:
            with self.database.session() as session:
                return session.get(model, entity_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to get %s %s", entity_type, entity_id)
            raise InternalError() from exc

    def list(self, entity_type: EntityType) -> list[Any]:
        """Return every row of ``entity_type`` in insertion order."""
        model = _MODELS[entity_type]
        try:
            with self.database.session() as session:
                stmt = select(model).order_by(literal_column("rowid"))
                return list(session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            logger.exception("Failed to list %s rows", entity_type)
            raise InternalError() from exc

    def create(self, entity_type: EntityType, payload: Mapping[str, Any]) -> Any:
        """Insert a validated payload and return the stored row.

        ``id`` and ``created_at`` are always generated here; values for them
        in ``payload`` are ignored.
        """
        model = _MODELS[entity_type]
        values = _strip_protected(payload)
        try:
            with self.database.session() as session:
                row = model(**values)
                session.add(row)
                session.flush()
                session.refresh(row)
                return row
        except SQLAlchemyError as exc:
            logger.exception("Failed to create %s", entity_type)
            raise InternalError() from exc

    def update(
        self, entity_type: EntityType, entity_id: str, changes: Mapping[str, Any]
    ) -> Any | None:
        """Merge ``changes`` into an existing row.

        Fields not present in ``changes`` keep their stored value.

        Returns:
            The updated row, or None if no row has ``entity_id``.
        """
        model = _MODELS[entity_type]
        values = _strip_protected(changes)
        try:
            with self.database.session() as session:
                row = session.get(model, entity_id)
                if row is None:
                    return None
                for field, value in values.items():
                    setattr(row, field, value)
                session.flush()
                return row
        except SQLAlchemyError as exc:
            logger.exception("Failed to update %s %s", entity_type, entity_id)
            raise InternalError() from exc

    def delete(self, entity_type: EntityType, entity_id: str) -> bool:
        """Hard-delete a row. Returns True if a row existed."""
        model = _MODELS[entity_type]
        try:
            with self.database.session() as session:
                result = session.execute(delete(model).where(model.id == entity_id))
                return result.rowcount > 0
        except SQLAlchemyError as exc:
            logger.exception("Failed to delete %s %s", entity_type, entity_id)
            raise InternalError() from exc

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> User | None:
        try:
            with self.database.session() as session:
                return session.get(User, user_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to get user %s", user_id)
            raise InternalError() from exc

    def get_user_by_username(self, username: str) -> User | None:
        try:
            with self.database.session() as session:
                stmt = select(User).where(User.username == username)
                return session.scalars(stmt).first()
        except SQLAlchemyError as exc:
            logger.exception("Failed to look up user %s", username)
            raise InternalError() from exc

    def create_user(self, username: str, password_hash: str, *, is_admin: bool = False) -> User:
        """Insert a user account.

        Raises:
            ConflictError: If ``username`` is already taken. The existing row
                is left untouched.
        """
        try:
            with self.database.session() as session:
                user = User(
                    username=username,
                    password_hash=password_hash,
                    is_admin="true" if is_admin else "false",
                )
                session.add(user)
                session.flush()
                session.refresh(user)
                return user
        except IntegrityError as exc:
            raise ConflictError(f"Username '{username}' already exists") from exc
        except SQLAlchemyError as exc:
            logger.exception("Failed to create user %s", username)
            raise InternalError() from exc


def _strip_protected(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if key not in _PROTECTED_FIELDS}
