"""ORM model for website portfolio entries."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from klystra_agency.data.db import Base
from klystra_agency.data.models._columns import new_id, utcnow
from klystra_agency.data.types import JSONText, UTCDateTime


class WebsiteProject(Base):
    """A website the agency built.

    ``tags`` is a list of strings persisted as JSON text; ``order`` is a
    free-form sort hint kept as text.
    """

    __tablename__ = "website_projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str] = mapped_column(String, nullable=False)
    demo_url: Mapped[str] = mapped_column(String, nullable=False)
    github_url: Mapped[str] = mapped_column(String, nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSONText(empty=list), nullable=True, default=list)
    order: Mapped[str] = mapped_column(String, nullable=True, default="0")
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )
