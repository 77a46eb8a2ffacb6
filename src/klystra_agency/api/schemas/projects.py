"""Pydantic schemas for the three portfolio project types.

Each type has a create model (all required fields, defaults for the
optional ones), an update model (every field optional, for merge-style
partial updates) and a response model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import Field, computed_field

from klystra_agency.api.schemas.common import (
    CamelModel,
    NotNull,
    OpaqueList,
    RequiredText,
    ResponseModel,
    SortOrder,
    StringList,
    StringMap,
)
from klystra_agency.services.media import classify_video_url, resolve_platform_icon

PatchText = Annotated[RequiredText | None, NotNull]
PatchOrder = Annotated[SortOrder | None, NotNull]


# ---------------------------------------------------------------------------
# Website projects
# ---------------------------------------------------------------------------


class WebsiteProjectCreate(CamelModel):
    title: RequiredText
    description: RequiredText
    image: RequiredText
    demo_url: RequiredText
    github_url: RequiredText
    tags: StringList = Field(default_factory=list)
    order: SortOrder = "0"


class WebsiteProjectUpdate(CamelModel):
    title: PatchText = None
    description: PatchText = None
    image: PatchText = None
    demo_url: PatchText = None
    github_url: PatchText = None
    tags: Annotated[StringList | None, NotNull] = None
    order: PatchOrder = None


class WebsiteProjectResponse(ResponseModel):
    id: str
    title: str
    description: str
    image: str
    demo_url: str
    github_url: str
    tags: list[str] = Field(default_factory=list)
    order: str | None = "0"
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Video projects
# ---------------------------------------------------------------------------


class VideoProjectCreate(CamelModel):
    title: RequiredText
    description: RequiredText
    duration: RequiredText
    quality: RequiredText
    thumbnail: RequiredText
    video_url: RequiredText
    category: RequiredText
    order: SortOrder = "0"


class VideoProjectUpdate(CamelModel):
    title: PatchText = None
    description: PatchText = None
    duration: PatchText = None
    quality: PatchText = None
    thumbnail: PatchText = None
    video_url: PatchText = None
    category: PatchText = None
    order: PatchOrder = None


class VideoProjectResponse(ResponseModel):
    id: str
    title: str
    description: str
    duration: str
    quality: str
    thumbnail: str
    video_url: str
    category: str
    order: str | None = "0"
    created_at: datetime | None = None

    @computed_field(alias="videoSource")
    @property
    def video_source(self) -> str:
        """How the player should load ``videoUrl``: local, youtube, vimeo or external."""
        return classify_video_url(self.video_url).value


# ---------------------------------------------------------------------------
# Social projects
# ---------------------------------------------------------------------------


class SocialProjectCreate(CamelModel):
    platform: RequiredText
    title: RequiredText
    description: RequiredText
    icon: RequiredText
    image: RequiredText
    images: StringList = Field(default_factory=list)
    lead_count: str | None = None
    videos: OpaqueList | None = None
    metrics: StringMap
    reach: RequiredText
    engagement: RequiredText
    campaign_url: str | None = None
    order: SortOrder = "0"


class SocialProjectUpdate(CamelModel):
    platform: PatchText = None
    title: PatchText = None
    description: PatchText = None
    icon: PatchText = None
    image: PatchText = None
    images: Annotated[StringList | None, NotNull] = None
    lead_count: str | None = None
    videos: OpaqueList | None = None
    metrics: Annotated[StringMap | None, NotNull] = None
    reach: PatchText = None
    engagement: PatchText = None
    campaign_url: str | None = None
    order: PatchOrder = None


class SocialProjectResponse(ResponseModel):
    id: str
    platform: str
    title: str
    description: str
    icon: str
    image: str
    images: list[str] = Field(default_factory=list)
    lead_count: str | None = None
    videos: list[Any] | None = None
    metrics: dict[str, str] = Field(default_factory=dict)
    reach: str
    engagement: str
    campaign_url: str | None = None
    order: str | None = "0"
    created_at: datetime | None = None

    @computed_field(alias="platformIcon")
    @property
    def platform_icon(self) -> str | None:
        """Known icon key for ``icon``; null means render a blank placeholder."""
        return resolve_platform_icon(self.icon)


class ProjectCatalogResponse(CamelModel):
    website: list[WebsiteProjectResponse]
    video: list[VideoProjectResponse]
    social: list[SocialProjectResponse]
