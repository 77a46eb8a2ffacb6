"""Shared Pydantic building blocks for request and response schemas.

Request models validate the client-suppliable subset of an entity; they
never declare ``id`` or ``created_at``. Unknown keys are ignored. The
``validate_payload`` helper turns Pydantic's errors into a flat list of
``FieldError`` instead of raising.
"""

from __future__ import annotations

import json
import re
from typing import Annotated, Any, TypeVar

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from klystra_agency.errors import FieldError, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class CamelModel(BaseModel):
    """Base model exchanging camelCase keys with API clients."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ResponseModel(CamelModel):
    model_config = ConfigDict(from_attributes=True)


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")
    return value


def _reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("must not be null")
    return value


def _check_email(value: str) -> str:
    if not _EMAIL_PATTERN.match(value):
        raise ValueError("must be a valid email address")
    return value


def _order_to_text(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return str(value)
    return value


def _decode_json_text(value: Any) -> Any:
    """Accept the legacy string-encoded form of list/map fields."""
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError as exc:
            raise ValueError("must be a JSON array or object") from exc
    return value


RequiredText = Annotated[str, AfterValidator(_require_text)]
EmailText = Annotated[str, AfterValidator(_check_email)]
SortOrder = Annotated[str, BeforeValidator(_order_to_text)]
StringList = Annotated[list[str], BeforeValidator(_decode_json_text)]
StringMap = Annotated[dict[str, str], BeforeValidator(_decode_json_text)]
OpaqueList = Annotated[list[Any], BeforeValidator(_decode_json_text)]

# Applied to optional fields of partial-update models whose column is NOT NULL:
# leaving the field out is fine, sending an explicit null is not.
NotNull = AfterValidator(_reject_null)


def field_errors(exc: PydanticValidationError) -> list[FieldError]:
    """Flatten a Pydantic error into one ``FieldError`` per violation."""
    errors: list[FieldError] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "body"
        message = error["msg"].removeprefix("Value error, ")
        errors.append(FieldError(field=location, message=message))
    return errors


def validate_payload(
    model: type[ModelT], payload: Any
) -> tuple[ModelT | None, list[FieldError]]:
    """Validate ``payload`` against ``model``.

    Returns:
        ``(instance, [])`` on success, ``(None, errors)`` otherwise.
    """
    if not isinstance(payload, dict):
        return None, [FieldError(field="body", message="must be a JSON object")]
    try:
        return model.model_validate(payload), []
    except PydanticValidationError as exc:
        return None, field_errors(exc)


def parse_payload(model: type[ModelT], payload: Any) -> ModelT:
    """Validate ``payload`` or raise ``ValidationError`` listing every bad field."""
    instance, errors = validate_payload(model, payload)
    if instance is None:
        raise ValidationError(errors)
    return instance
