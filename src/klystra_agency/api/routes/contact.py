"""Contact form routes: public submission and admin listing."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from klystra_agency.api.dependencies import AdminDep, JsonPayload, RepositoryDep
from klystra_agency.api.schemas.common import parse_payload
from klystra_agency.api.schemas.contact import (
    ContactMessageCreate,
    ContactMessageResponse,
    ContactSubmitResponse,
)
from klystra_agency.data.repository import EntityType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["contact"])


@router.post(
    "",
    response_model=ContactSubmitResponse,
    responses={400: {"description": "Invalid form data"}},
)
def submit_contact_message(
    payload: JsonPayload,
    repository: RepositoryDep,
) -> ContactSubmitResponse:
    """Store a message from the public contact form. No authentication."""
    data = parse_payload(ContactMessageCreate, payload)
    message = repository.create(EntityType.CONTACT_MESSAGE, data.model_dump())

    logger.info(
        "New contact message %s from %s %s <%s> about %s",
        message.id,
        message.first_name,
        message.last_name,
        message.email,
        message.subject,
    )
    return ContactSubmitResponse(id=message.id)


@router.get("", response_model=list[ContactMessageResponse])
def list_contact_messages(
    _admin: AdminDep,
    repository: RepositoryDep,
) -> list[ContactMessageResponse]:
    """List every contact message. Admin only."""
    messages = repository.list(EntityType.CONTACT_MESSAGE)
    return [ContactMessageResponse.model_validate(message) for message in messages]
