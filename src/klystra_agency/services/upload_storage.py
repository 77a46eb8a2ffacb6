"""Helpers for storing uploaded images and videos on disk.

Files land directly under the upload root as
``<sanitized-base>-<timestamp-ms><ext>`` and are served from ``/uploads/``.
The storage has no idea which project will end up referencing a file.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import BinaryIO

from klystra_agency.errors import FieldError, PayloadTooLargeError, ValidationError
from klystra_agency.services.media import UPLOADS_URL_PREFIX

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
MAX_BASENAME_LENGTH = 80

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp", ".svg", ".avif")
VIDEO_EXTENSIONS = (".mp4", ".webm", ".mov", ".m4v", ".ogg", ".ogv", ".avi", ".mkv")

_UNSAFE_BASENAME = re.compile(r"[^a-z0-9\-_]")
_UNSAFE_EXTENSION = re.compile(r"[^a-z0-9.]")


class MediaKind(StrEnum):
    IMAGE = "image"
    VIDEO = "video"


_EXTENSIONS = {MediaKind.IMAGE: IMAGE_EXTENSIONS, MediaKind.VIDEO: VIDEO_EXTENSIONS}
_KIND_MESSAGES = {
    MediaKind.IMAGE: "must be an image file",
    MediaKind.VIDEO: "must be a video file",
}


@dataclass(frozen=True)
class StoredUpload:
    filename: str
    path: Path
    url: str
    size_bytes: int


def sanitize_filename(original: str) -> tuple[str, str]:
    """Split ``original`` into a safe lower-case base name and extension."""
    name = Path(original.replace("\\", "/")).name
    path = Path(name)
    base = _UNSAFE_BASENAME.sub("-", path.stem.lower())[:MAX_BASENAME_LENGTH]
    extension = _UNSAFE_EXTENSION.sub("", path.suffix.lower())
    if extension == ".":
        extension = ""
    return base or "upload", extension


class UploadStorage:
    """Writes uploads below ``root`` and hands back their public URL."""

    def __init__(
        self,
        root: Path,
        *,
        max_bytes: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.root = root
        self.max_bytes = max_bytes
        self._clock = clock

    def ensure_root(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def save(
        self,
        source: BinaryIO,
        *,
        filename: str | None,
        content_type: str | None,
        kind: MediaKind,
    ) -> StoredUpload:
        """Stream ``source`` to a new file and return where it was stored.

        Raises:
            ValidationError: If no file was given or it is not of ``kind``.
            PayloadTooLargeError: If the stream exceeds ``max_bytes``. The
                partial file is removed.
        """
        if not filename:
            raise ValidationError(
                [FieldError(field="file", message="No file uploaded")], "No file uploaded"
            )
        _check_media_kind(filename, content_type, kind)

        base, extension = sanitize_filename(filename)
        target, handle = self._open_unique(base, extension)
        written = 0
        try:
            with handle:
                while chunk := source.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise PayloadTooLargeError(self.max_bytes)
                    handle.write(chunk)
        except Exception:
            target.unlink(missing_ok=True)
            raise

        logger.info("Stored %s upload %s (%d bytes)", kind, target.name, written)
        return StoredUpload(
            filename=target.name,
            path=target,
            url=f"{UPLOADS_URL_PREFIX}{target.name}",
            size_bytes=written,
        )

    def _open_unique(self, base: str, extension: str) -> tuple[Path, BinaryIO]:
        root = self.ensure_root()
        stamp = int(self._clock() * 1000)
        while True:
            target = root / f"{base}-{stamp}{extension}"
            try:
                return target, target.open("xb")
            except FileExistsError:
                stamp += 1


def _check_media_kind(filename: str, content_type: str | None, kind: MediaKind) -> None:
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    if mime.startswith(f"{kind.value}/"):
        return
    if Path(filename).suffix.lower() in _EXTENSIONS[kind]:
        return
    raise ValidationError(
        [FieldError(field="file", message=_KIND_MESSAGES[kind])], f"Unsupported {kind.value} file"
    )
