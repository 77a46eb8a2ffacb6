"""Login, logout and current-user routes."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from klystra_agency.api.dependencies import (
    SESSION_COOKIE_NAME,
    JsonPayload,
    RepositoryDep,
    get_current_principal,
    get_session_store,
    get_session_token,
    get_settings,
)
from klystra_agency.api.schemas.auth import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    SuccessResponse,
    UserPublic,
)
from klystra_agency.api.schemas.common import parse_payload
from klystra_agency.config import Settings
from klystra_agency.services.auth import Principal, authenticate
from klystra_agency.services.sessions import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Missing username or password"},
        401: {"description": "Incorrect username or password"},
    },
)
def login(
    request: Request,
    response: Response,
    payload: JsonPayload,
    repository: RepositoryDep,
    sessions: Annotated[SessionStore, Depends(get_session_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> LoginResponse:
    """Verify credentials and start a fresh session.

    Any session the caller presented, and any other session of the same user,
    is invalidated before the new token is issued.
    """
    credentials = parse_payload(LoginRequest, payload)
    principal = authenticate(repository, credentials.username, credentials.password)

    token = sessions.issue(principal.id, replacing=get_session_token(request))
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=int(settings.session_ttl.total_seconds()),
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "lax",
    )
    logger.info("User %s logged in", principal.username)
    return LoginResponse(user=UserPublic.model_validate(principal), token=token)


@router.post("/logout", response_model=SuccessResponse, response_model_exclude_none=True)
def logout(
    request: Request,
    response: Response,
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> SuccessResponse:
    """End the caller's session, if any. Always succeeds."""
    token = get_session_token(request)
    if token is not None:
        sessions.revoke(token)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return SuccessResponse()


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    responses={401: {"description": "No valid session"}},
)
def me(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> CurrentUserResponse:
    return CurrentUserResponse(user=UserPublic.model_validate(principal))
