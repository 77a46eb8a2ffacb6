"""ORM model for video portfolio entries."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from klystra_agency.data.db import Base
from klystra_agency.data.models._columns import new_id, utcnow
from klystra_agency.data.types import UTCDateTime


class VideoProject(Base):
    """A video the agency produced.

    ``video_url`` is either an embeddable external link or a ``/uploads/``
    path returned by the upload endpoint.
    """

    __tablename__ = "video_projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    duration: Mapped[str] = mapped_column(String, nullable=False)
    quality: Mapped[str] = mapped_column(String, nullable=False)
    thumbnail: Mapped[str] = mapped_column(String, nullable=False)
    video_url: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    order: Mapped[str] = mapped_column(String, nullable=True, default="0")
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )
