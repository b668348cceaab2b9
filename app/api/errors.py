"""
app/api/errors.py

Import rejection exception and the handler that renders it as a top-level
JSON error body.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.schemas.property_import import (
    ImportRejectedResponse,
    ImportSummaryResponse,
    PropertyRowErrorResponse,
)


class ImportRejectedError(Exception):
    """
    Raised by intake dependencies and the import endpoint to end a request
    with an ``ImportRejectedResponse`` body.
    """

    def __init__(self, status_code: int, body: ImportRejectedResponse) -> None:
        super().__init__(body.error)
        self.status_code = status_code
        self.body = body


def reject(
    status_code: int,
    error: str,
    *,
    message: str | None = None,
    summary: ImportSummaryResponse | None = None,
    validation_errors: list[PropertyRowErrorResponse] | None = None,
) -> ImportRejectedError:
    """
    Build the rejection for ``status_code`` with the import error body shape.
    """

    body = ImportRejectedResponse(
        error=error,
        message=message,
        summary=summary,
        validation_errors=validation_errors,
    )
    return ImportRejectedError(status_code, body)


async def import_rejected_handler(request: Request, exc: ImportRejectedError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def register_exception_handlers(application: FastAPI) -> None:
    application.add_exception_handler(ImportRejectedError, import_rejected_handler)
