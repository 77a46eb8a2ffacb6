"""Shared dependencies for API routes.

The repository, session store, upload storage and settings are created
once by ``create_app`` and kept on ``app.state``; routes receive them
through these providers so tests can build isolated apps.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated, Any

from fastapi import Depends, Request
from starlette.datastructures import FormData

from klystra_agency.config import Settings
from klystra_agency.data.repository import Repository
from klystra_agency.errors import (
    FieldError,
    ForbiddenError,
    PayloadTooLargeError,
    UnauthorizedError,
    ValidationError,
)
from klystra_agency.services.auth import Principal
from klystra_agency.services.sessions import SessionStore
from klystra_agency.services.upload_storage import UploadStorage

SESSION_COOKIE_NAME = "klystra_session"

# Room for multipart boundaries and part headers around the file itself.
MULTIPART_OVERHEAD_BYTES = 16 * 1024


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(request: Request) -> Repository:
    return request.app.state.repository


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_upload_storage(request: Request) -> UploadStorage:
    return request.app.state.uploads


def get_session_token(request: Request) -> str | None:
    """Return the session token presented by the caller, if any.

    An ``Authorization: Bearer`` header takes precedence over the session
    cookie; a header with any other scheme counts as no token.
    """
    header = request.headers.get("authorization")
    if header is not None:
        scheme, _, token = header.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
        return None
    return request.cookies.get(SESSION_COOKIE_NAME) or None


def get_optional_principal(
    request: Request,
    repository: Annotated[Repository, Depends(get_repository)],
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> Principal | None:
    """Resolve the caller's session to a principal, or None when anonymous."""
    token = get_session_token(request)
    if token is None:
        return None

    user_id = sessions.resolve(token)
    if user_id is None:
        return None

    user = repository.get_user(user_id)
    if user is None:
        # The account disappeared while the session was live.
        sessions.revoke(token)
        return None
    return Principal.from_user(user)


def get_current_principal(
    principal: Annotated[Principal | None, Depends(get_optional_principal)],
) -> Principal:
    """Require an authenticated caller.

    Raises:
        UnauthorizedError: If no valid session was presented (401).
    """
    if principal is None:
        raise UnauthorizedError()
    return principal


def require_admin(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """Require an authenticated caller with the admin role.

    Raises:
        UnauthorizedError: If no valid session was presented (401).
        ForbiddenError: If the caller is not an admin (403).
    """
    if not principal.has_admin_role:
        raise ForbiddenError()
    return principal



async def get_json_payload(request: Request) -> Any:
    """Decode the JSON request body.

    Declared as a dependency rather than a ``Body()`` parameter so that guards
    listed before it (``AdminDep``) run before the body is touched.

    Raises:
        ValidationError: If the body is empty or not valid JSON.
    """
    try:
        return await request.json()
    except ValueError as exc:
        raise ValidationError(
            [FieldError(field="body", message="must be valid JSON")], "Invalid JSON body"
        ) from exc


async def get_upload_form(
    request: Request,
    storage: Annotated[UploadStorage, Depends(get_upload_storage)],
) -> AsyncIterator[FormData]:
    """Parse the multipart form of an upload request and close it afterwards.

    A declared ``Content-Length`` that cannot fit within the upload limit is
    rejected before any of the body is read.

    Raises:
        PayloadTooLargeError: If the declared length exceeds the limit.
    """
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > storage.max_bytes + MULTIPART_OVERHEAD_BYTES:
        raise PayloadTooLargeError(storage.max_bytes)

    form = await request.form()
    try:
        yield form
    finally:
        await form.close()


RepositoryDep = Annotated[Repository, Depends(get_repository)]
AdminDep = Annotated[Principal, Depends(require_admin)]
JsonPayload = Annotated[Any, Depends(get_json_payload)]
UploadFormDep = Annotated[FormData, Depends(get_upload_form)]
