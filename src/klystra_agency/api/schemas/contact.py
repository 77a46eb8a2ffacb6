"""Pydantic schemas for the contact form."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from klystra_agency.api.schemas.common import CamelModel, EmailText, RequiredText, ResponseModel

MIN_MESSAGE_LENGTH = 10


def _check_message_length(value: str) -> str:
    if len(value) < MIN_MESSAGE_LENGTH:
        raise ValueError(f"must be at least {MIN_MESSAGE_LENGTH} characters long")
    return value


class ContactMessageCreate(CamelModel):
    """Fields a visitor submits through the contact form."""

    first_name: RequiredText
    last_name: RequiredText
    email: EmailText
    subject: RequiredText
    message: Annotated[RequiredText, AfterValidator(_check_message_length)]


class ContactMessageResponse(ResponseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    subject: str
    message: str
    created_at: datetime | None = None


class ContactSubmitResponse(CamelModel):
    success: bool = True
    message: str = "Thank you for your message! We will get back to you soon."
    id: str
