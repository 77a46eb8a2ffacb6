"""Helpers describing how stored media references should be rendered."""

from __future__ import annotations

from enum import StrEnum

UPLOADS_URL_PREFIX = "/uploads/"

# Platforms the site has an icon for; anything else renders a blank placeholder.
PLATFORM_ICONS = frozenset({"instagram", "linkedin", "tiktok"})

_EMBED_HOSTS = {
    "youtube.com": "youtube",
    "youtu.be": "youtube",
    "vimeo.com": "vimeo",
}


class VideoSource(StrEnum):
    LOCAL = "local"
    YOUTUBE = "youtube"
    VIMEO = "vimeo"
    EXTERNAL = "external"


def classify_video_url(url: str | None) -> VideoSource:
    """Tell whether a video URL is a local upload, an embeddable host, or other.

    Local uploads are recognised by the ``/uploads/`` prefix, embeddable hosts
    by a substring match on their domain. Matching ignores case.
    """
    lowered = (url or "").strip().lower()
    if lowered.startswith(UPLOADS_URL_PREFIX):
        return VideoSource.LOCAL
    for host, source in _EMBED_HOSTS.items():
        if host in lowered:
            return VideoSource(source)
    return VideoSource.EXTERNAL


def resolve_platform_icon(icon: str | None) -> str | None:
    """Return the known icon key for ``icon``, or None for the blank placeholder."""
    key = (icon or "").strip().lower()
    return key if key in PLATFORM_ICONS else None
