"""Tests for translating request parsing errors into the shared error body."""

from __future__ import annotations

import asyncio
import json

from fastapi.exceptions import RequestValidationError

from klystra_agency.api.errors import request_validation_handler


def _handle(errors: list[dict[str, object]]) -> tuple[int, dict[str, object]]:
    response = asyncio.run(request_validation_handler(None, RequestValidationError(errors)))
    return response.status_code, json.loads(response.body)


def test_json_decode_error_is_reported_on_body() -> None:
    status, body = _handle(
        [{"type": "json_invalid", "loc": ("body", 1), "msg": "JSON decode error", "input": {}}]
    )

    assert status == 400
    assert body["errors"] == [{"field": "body", "message": "JSON decode error"}]


def test_location_prefix_is_dropped() -> None:
    status, body = _handle(
        [{"type": "missing", "loc": ("query", "page"), "msg": "Field required", "input": None}]
    )

    assert status == 400
    assert body == {
        "success": False,
        "message": "Invalid data",
        "errors": [{"field": "page", "message": "Field required"}],
    }
