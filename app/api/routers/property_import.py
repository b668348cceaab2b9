"""
app/api/routers/property_import.py

Property CSV bulk-import HTTP endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, UploadFile, status

from app.api.dependencies import (
    get_broker_id,
    get_csv_upload,
    get_property_gateway,
    read_csv_bytes,
)
from app.api.errors import reject
from app.config import PropertyImportSettings, get_property_import_settings
from app.domain.property_import import ImportSummary, RowError
from app.repositories.property_repository import PropertyGateway
from app.schemas.property_import import (
    ImportSummaryResponse,
    PropertyImportResponse,
    PropertyRowErrorResponse,
)
from app.services.csv_decoder import CSVDecodeError
from app.services.property_import_service import (
    EmptyCSVFileError,
    NoValidRecordsError,
    PropertyImportService,
    PropertyPersistenceError,
    get_property_import_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["import"])


@router.post(
    "/import-properties",
    response_model=PropertyImportResponse,
    response_model_exclude_none=True,
)
def import_properties(
    file: UploadFile = Depends(get_csv_upload),
    broker_id: str = Depends(get_broker_id),
    gateway: PropertyGateway = Depends(get_property_gateway),
    settings: PropertyImportSettings = Depends(get_property_import_settings),
    import_service: PropertyImportService = Depends(get_property_import_service),
) -> PropertyImportResponse:
    """
    Validate a broker's CSV of property listings and store the valid rows.
    """

    try:
        file_bytes = read_csv_bytes(file, max_bytes=settings.max_upload_bytes)
        logger.info(
            "Starting CSV import file_name=%r file_size=%d broker_id=%s",
            file.filename,
            len(file_bytes),
            broker_id,
        )
        summary = import_service.import_properties(
            file_bytes=file_bytes,
            broker_id=broker_id,
            gateway=gateway,
        )
    except EmptyCSVFileError as exc:
        raise reject(status.HTTP_400_BAD_REQUEST, "Empty CSV file provided") from exc
    except CSVDecodeError as exc:
        logger.warning("CSV import rejected file_name=%r broker_id=%s: %s", file.filename, broker_id, exc)
        raise reject(status.HTTP_400_BAD_REQUEST, f"Malformed CSV file: {exc}") from exc
    except NoValidRecordsError as exc:
        logger.info(
            "CSV import rejected, no valid rows file_name=%r broker_id=%s failed=%d",
            file.filename,
            broker_id,
            exc.summary.failed,
        )
        raise reject(
            status.HTTP_400_BAD_REQUEST,
            "No valid properties found in CSV",
            summary=_summary_response(exc.summary),
            validation_errors=_row_error_responses(exc.validation_errors),
        ) from exc
    except PropertyPersistenceError as exc:
        logger.exception(
            "CSV import failed import_id=%s file_name=%r broker_id=%s already_persisted=%d",
            exc.import_id,
            file.filename,
            broker_id,
            exc.persisted,
        )
        raise reject(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error during import",
            message="Please try again or contact support if the problem persists",
        ) from exc
    finally:
        file.file.close()

    logger.info(
        "CSV import completed import_id=%s total_rows=%d successful=%d failed=%d processing_time_ms=%d broker_id=%s",
        summary.import_id,
        summary.total_processed,
        summary.successful,
        summary.failed,
        summary.processing_time_ms,
        broker_id,
    )

    message = "Import completed"
    validation_errors = None
    if summary.failed > 0:
        message = f"Import completed with {summary.failed} validation errors"
        validation_errors = _row_error_responses(summary.validation_errors)

    return PropertyImportResponse(
        success=True,
        message=message,
        summary=_summary_response(summary),
        validation_errors=validation_errors,
    )


def _summary_response(summary: ImportSummary) -> ImportSummaryResponse:
    return ImportSummaryResponse(
        total_processed=summary.total_processed,
        successful=summary.successful,
        failed=summary.failed,
        processing_time_ms=summary.processing_time_ms,
    )


def _row_error_responses(errors: list[RowError]) -> list[PropertyRowErrorResponse]:
    return [
        PropertyRowErrorResponse(row=error.row_number, data=error.raw_data, error=error.message)
        for error in errors
    ]
