"""ORM model for social media campaign entries."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from klystra_agency.data.db import Base
from klystra_agency.data.models._columns import new_id, utcnow
from klystra_agency.data.types import JSONText, UTCDateTime


class SocialProject(Base):
    """A social media campaign.

    Attributes:
        icon: Platform icon key (``instagram``, ``linkedin``, ...).
        images: Extra gallery image URLs, JSON text.
        videos: Opaque embedded video descriptors, JSON text or NULL.
        metrics: Label to value map rendered as a key/value list, JSON text.
    """

    __tablename__ = "social_projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    platform: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[str] = mapped_column(String, nullable=False)
    image: Mapped[str] = mapped_column(String, nullable=False)
    images: Mapped[list[str]] = mapped_column(JSONText(empty=list), nullable=True, default=list)
    lead_count: Mapped[str | None] = mapped_column(String, nullable=True)
    videos: Mapped[list[Any] | None] = mapped_column(JSONText(), nullable=True)
    metrics: Mapped[dict[str, str]] = mapped_column(JSONText(empty=dict), nullable=False)
    reach: Mapped[str] = mapped_column(String, nullable=False)
    engagement: Mapped[str] = mapped_column(String, nullable=False)
    campaign_url: Mapped[str | None] = mapped_column(String, nullable=True)
    order: Mapped[str] = mapped_column(String, nullable=True, default="0")
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )
