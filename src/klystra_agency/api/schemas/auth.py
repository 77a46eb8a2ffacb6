"""Pydantic schemas for login and the current principal."""

from __future__ import annotations

from pydantic import Field

from klystra_agency.api.schemas.common import CamelModel, RequiredText, ResponseModel


class LoginRequest(CamelModel):
    username: RequiredText
    password: str = Field(min_length=1)


class UserPublic(ResponseModel):
    """A user as shown to clients; the password hash is never included."""

    id: str
    username: str
    is_admin: str


class LoginResponse(CamelModel):
    success: bool = True
    user: UserPublic
    token: str


class CurrentUserResponse(CamelModel):
    user: UserPublic


class SuccessResponse(CamelModel):
    success: bool = True
    message: str | None = None
