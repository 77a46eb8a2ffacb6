"""Database configuration and session management.

This module provides SQLAlchemy 2.x ORM infrastructure including:
- Engine creation with SQLite backend
- Session factory with proper transaction handling
- Table creation for the registered ORM models
- Context manager for safe session usage

A ``Database`` is constructed explicitly from a URL and handed to whatever
needs it (the repository, the CLI, tests), so several independent stores can
live in one process.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""


class Database:
    """Owns one engine and its session factory."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url
        self.engine: Engine = _create_engine(url, echo=echo)
        self._session_factory: sessionmaker[Session] = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    def create_all(self) -> None:
        """Create all tables defined on the Base metadata."""
        # Import ORM models so their metadata is registered on Base before create_all.
        from klystra_agency.data.models import (  # noqa: F401
            contact_message,
            social_project,
            user,
            video_project,
            website_project,
        )

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide a transactional scope around a series of operations."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()


def _create_engine(url: str, *, echo: bool) -> Engine:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, echo=echo, future=True)

    # Request handlers run in a thread pool, so the connection may cross threads.
    connect_args = {"check_same_thread": False}
    if parsed.database in (None, "", ":memory:"):
        # A single shared connection keeps an in-memory database alive.
        return create_engine(
            url, echo=echo, future=True, connect_args=connect_args, poolclass=StaticPool
        )
    return create_engine(url, echo=echo, future=True, connect_args=connect_args)
