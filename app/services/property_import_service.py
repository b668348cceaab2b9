"""
app/services/property_import_service.py

Service layer for the property CSV bulk-import workflow.

The import is one pull loop per request: records are decoded one at a time,
validated, and valid ones are buffered and flushed to the persistence
gateway whenever the buffer reaches the batch size. Invalid rows never abort
the run; they are collected with their row number and raw data. Decode
errors and gateway failures are fatal.

A gateway failure does not undo batches that were already stored. Every row
of a run carries the run's ``import_id`` so a partially stored import can be
located and cleaned up.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from functools import lru_cache

from app.config import get_property_import_settings
from app.domain.property_import import (
    ImportSummary,
    PropertyInput,
    RowError,
    ValidationFailure,
)
from app.repositories.property_repository import PropertyGateway
from app.services.csv_decoder import check_framing, iter_records
from app.validators.property_validator import PropertyRowValidator
from db.repositories.errors import PersistenceGatewayError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PropertyImportError(Exception):
    """
    Base class for import failures that end the run without a summary.
    """


class EmptyCSVFileError(PropertyImportError):
    """
    Raised when the uploaded buffer has no bytes at all.
    """


class NoValidRecordsError(PropertyImportError):
    """
    Raised when every row of the file failed validation.
    """

    def __init__(self, summary: ImportSummary) -> None:
        super().__init__("No valid properties found in CSV.")
        self.summary = summary

    @property
    def validation_errors(self) -> list[RowError]:
        return self.summary.validation_errors


class PropertyPersistenceError(PropertyImportError):
    """
    Raised when a batch of valid rows cannot be persisted.
    """

    def __init__(self, *, import_id: uuid.UUID, persisted: int) -> None:
        super().__init__(f"Failed to persist properties for import {import_id}.")
        self.import_id = import_id
        self.persisted = persisted


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class _ImportRun:
    """Mutable per-request state of one import."""

    def __init__(self, *, gateway: PropertyGateway) -> None:
        self.import_id = uuid.uuid4()
        self.gateway = gateway
        self.valid_count = 0
        self.successful = 0
        self.errors: list[RowError] = []
        self.batch: list[PropertyInput] = []


class PropertyImportService:
    """
    Coordinates CSV decoding, row validation, batching and persistence.
    """

    def __init__(
        self,
        *,
        batch_size: int,
        log_validation_errors: bool = True,
        validator: PropertyRowValidator | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._batch_size = max(1, batch_size)
        self._log_validation_errors = log_validation_errors
        self._validator = validator or PropertyRowValidator()
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def import_properties(
        self,
        *,
        file_bytes: bytes,
        broker_id: str,
        gateway: PropertyGateway,
    ) -> ImportSummary:
        """
        Validate every row of ``file_bytes`` and store the valid ones in batches.

        Args:
            file_bytes: Raw CSV upload, header line first.
            broker_id:  Caller identity stamped on every stored row.
            gateway:    Persistence gateway receiving the batches.

        Raises:
            EmptyCSVFileError:        ``file_bytes`` is empty.
            CSVDecodeError:           the file is not decodable; nothing is stored.
            NoValidRecordsError:      no row passed validation; nothing is stored.
            PropertyPersistenceError: a batch could not be stored.
        """
        if not file_bytes:
            raise EmptyCSVFileError("Empty CSV file provided.")

        started = time.perf_counter()
        run = _ImportRun(gateway=gateway)

        check_framing(file_bytes)

        row_number = 0
        for raw in iter_records(file_bytes):
            row_number += 1
            result = self._validator.validate(raw)
            if isinstance(result, ValidationFailure):
                self._record_error(run, RowError(row_number=row_number, raw_data=raw, message=result.message))
                continue

            run.valid_count += 1
            run.batch.append(
                PropertyInput.from_validated(
                    result,
                    broker_id=broker_id,
                    created_at=self._clock(),
                    import_id=run.import_id,
                )
            )
            if len(run.batch) >= self._batch_size:
                self._flush(run)

        if run.valid_count == 0:
            raise NoValidRecordsError(self._summarize(run, started))

        if run.batch:
            self._flush(run)

        return self._summarize(run, started)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _flush(self, run: _ImportRun) -> None:
        batch = list(run.batch)
        run.batch.clear()
        try:
            stored = run.gateway.insert_many(batch)
        except PersistenceGatewayError as exc:
            logger.error(
                "Property batch insert failed import_id=%s batch_size=%d already_persisted=%d",
                run.import_id,
                len(batch),
                run.successful,
            )
            raise PropertyPersistenceError(import_id=run.import_id, persisted=run.successful) from exc

        run.successful += len(stored)
        logger.info(
            "Persisted property batch import_id=%s batch_size=%d stored=%d total_stored=%d",
            run.import_id,
            len(batch),
            len(stored),
            run.successful,
        )

    def _record_error(self, run: _ImportRun, error: RowError) -> None:
        if self._log_validation_errors:
            logger.warning(
                "CSV validation error import_id=%s row=%s message=%s",
                run.import_id,
                error.row_number,
                error.message,
            )
        run.errors.append(error)

    @staticmethod
    def _summarize(run: _ImportRun, started: float) -> ImportSummary:
        failed = len(run.errors)
        return ImportSummary(
            import_id=run.import_id,
            total_processed=run.valid_count + failed,
            successful=run.successful,
            failed=failed,
            processing_time_ms=int((time.perf_counter() - started) * 1000),
            validation_errors=list(run.errors),
        )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_property_import_service() -> PropertyImportService:
    """
    Build and cache the import service with env-driven settings.
    """
    settings = get_property_import_settings()
    return PropertyImportService(
        batch_size=settings.batch_size,
        log_validation_errors=settings.log_validation_errors,
    )
