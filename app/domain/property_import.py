"""
app/domain/property_import.py

Domain models used by the property CSV import flow.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Union

RawRecord = dict[str, str]


@dataclass(frozen=True)
class ValidatedProperty:
    """
    Business fields of one CSV row that passed validation.
    """

    title: str
    price: Decimal
    project_id: str


@dataclass(frozen=True)
class ValidationFailure:
    """
    First rule a CSV row violated.
    """

    field: str
    message: str


RowValidationResult = Union[ValidatedProperty, ValidationFailure]


@dataclass(frozen=True)
class PropertyInput:
    """
    Validated property enriched with upload metadata, ready for persistence.
    """

    title: str
    price: Decimal
    project_id: str
    broker_id: str
    created_at: datetime
    import_id: uuid.UUID

    @classmethod
    def from_validated(
        cls,
        validated: ValidatedProperty,
        *,
        broker_id: str,
        created_at: datetime,
        import_id: uuid.UUID,
    ) -> PropertyInput:
        return cls(
            title=validated.title,
            price=validated.price,
            project_id=validated.project_id,
            broker_id=broker_id,
            created_at=created_at,
            import_id=import_id,
        )


@dataclass(frozen=True)
class StoredProperty:
    """
    Property row as returned by the persistence gateway.
    """

    id: int
    record: PropertyInput


@dataclass(frozen=True)
class RowError:
    """
    One rejected CSV row. `row_number` counts data rows from 1; the header
    line is not counted.
    """

    row_number: int
    raw_data: RawRecord
    message: str


@dataclass(frozen=True)
class ImportSummary:
    """
    End-of-run import summary.
    """

    import_id: uuid.UUID
    total_processed: int
    successful: int
    failed: int
    processing_time_ms: int
    validation_errors: list[RowError] = field(default_factory=list)
