"""
app/domain package marker.
"""

from app.domain.property_import import (
    ImportSummary,
    PropertyInput,
    RawRecord,
    RowError,
    RowValidationResult,
    StoredProperty,
    ValidatedProperty,
    ValidationFailure,
)

__all__ = [
    "ImportSummary",
    "PropertyInput",
    "RawRecord",
    "RowError",
    "RowValidationResult",
    "StoredProperty",
    "ValidatedProperty",
    "ValidationFailure",
]
