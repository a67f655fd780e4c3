"""Exception-to-response mapping for the HTTP API.

Every error body has the same `{error, message}` shape. Store and internal failures are logged with
their traceback; the client only sees the detail outside production.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from coursequest.db.query import StoreError
from coursequest.intent.validation import FilterValidationError
from coursequest.search.compare import MissingParameterError, TooManyIdsError

logger = logging.getLogger(__name__)

_VALIDATION_TITLES: dict[type[FilterValidationError], str] = {
    MissingParameterError: "Missing required parameter",
    TooManyIdsError: "Too many course IDs",
}


def error_body(error: str, message: str) -> dict[str, str]:
    return {"error": error, "message": message}


def _request_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
    return f"Invalid {location or 'request'}: {first.get('msg', 'invalid value')}"


def register_error_handlers(api: FastAPI, *, expose_details: bool) -> None:
    """Install the API's exception handlers.

    Args:
        expose_details: Include internal error text in 500 responses (non-production only).
    """

    def internal_error(exc: Exception, fallback: str) -> JSONResponse:
        message = f"{fallback}: {exc}" if expose_details else fallback
        return JSONResponse(status_code=500, content=error_body("Internal Server Error", message))

    @api.exception_handler(FilterValidationError)
    async def handle_filter_validation(_request: Request, exc: FilterValidationError) -> JSONResponse:
        title = _VALIDATION_TITLES.get(type(exc), "Validation Error")
        return JSONResponse(status_code=400, content=error_body(title, str(exc)))

    @api.exception_handler(RequestValidationError)
    async def handle_request_validation(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=error_body("Validation Error", _request_validation_message(exc)),
        )

    @api.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
        logger.exception("store failure path=%s", request.url.path)
        return internal_error(exc, "Failed to query courses")

    @api.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error path=%s", request.url.path)
        return internal_error(exc, "Unexpected server error")
