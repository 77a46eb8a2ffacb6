"""Exception handlers translating errors into JSON responses.

Every error body looks like ``{"success": false, "message": ...}``;
validation failures add an ``errors`` list of ``{field, message}``.
Unexpected exceptions are logged in full and answered with a generic 500.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from klystra_agency.errors import AppError, FieldError, InternalError, ValidationError

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report FastAPI's own request parsing errors in the shared 400 shape."""
    errors: list[FieldError] = []
    for error in exc.errors():
        if error.get("type") == "json_invalid":
            # The location after "body" is a character offset, not a field.
            field = "body"
        else:
            # Drop the "body"/"query" prefix FastAPI puts on every location.
            location = [str(part) for part in error.get("loc", ())][1:]
            field = ".".join(location) or "body"
        errors.append(FieldError(field=field, message=error.get("msg", "invalid value")))
    return await app_error_handler(request, ValidationError(errors))


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error handling %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=InternalError().to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
