"""Admin-only media upload routes.

The returned URL is meant to be stored verbatim on a project's ``image``,
``thumbnail`` or ``videoUrl`` field. The multipart form is parsed only after
the admin guard has passed.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from starlette.datastructures import FormData, UploadFile

from klystra_agency.api.dependencies import AdminDep, UploadFormDep, get_upload_storage
from klystra_agency.api.schemas.common import CamelModel
from klystra_agency.errors import FieldError, ValidationError
from klystra_agency.services.upload_storage import MediaKind, UploadStorage

router = APIRouter(prefix="/upload", tags=["upload"])

# Field name checked when the kind-specific one is absent.
GENERIC_FILE_FIELD = "file"

_UPLOAD_RESPONSES = {
    400: {"description": "No file uploaded or wrong media type"},
    413: {"description": "File exceeds the upload size limit"},
}


class UploadResponse(CamelModel):
    success: bool = True
    url: str


def _pick_upload(form: FormData, kind: MediaKind) -> UploadFile:
    for field in (kind.value, GENERIC_FILE_FIELD):
        value = form.get(field)
        if isinstance(value, UploadFile):
            return value
    raise ValidationError(
        [FieldError(field=kind.value, message="No file uploaded")], "No file uploaded"
    )


def _store(storage: UploadStorage, form: FormData, kind: MediaKind) -> UploadResponse:
    upload = _pick_upload(form, kind)
    stored = storage.save(
        upload.file,
        filename=upload.filename,
        content_type=upload.content_type,
        kind=kind,
    )
    return UploadResponse(url=stored.url)


@router.post("/image", response_model=UploadResponse, responses=_UPLOAD_RESPONSES)
def upload_image(
    _admin: AdminDep,
    storage: Annotated[UploadStorage, Depends(get_upload_storage)],
    form: UploadFormDep,
) -> UploadResponse:
    """Store the ``image`` (or ``file``) form field and return its public URL."""
    return _store(storage, form, MediaKind.IMAGE)


@router.post("/video", response_model=UploadResponse, responses=_UPLOAD_RESPONSES)
def upload_video(
    _admin: AdminDep,
    storage: Annotated[UploadStorage, Depends(get_upload_storage)],
    form: UploadFormDep,
) -> UploadResponse:
    """Store the ``video`` (or ``file``) form field and return its public URL."""
    return _store(storage, form, MediaKind.VIDEO)
