"""
app/schemas package marker.
"""

from app.schemas.property_import import (
    ImportRejectedResponse,
    ImportSummaryResponse,
    PropertyImportResponse,
    PropertyRowErrorResponse,
)

__all__ = [
    "ImportRejectedResponse",
    "ImportSummaryResponse",
    "PropertyImportResponse",
    "PropertyRowErrorResponse",
]
