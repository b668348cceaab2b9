"""
app/services package marker.
"""

from app.services.csv_decoder import CSVDecodeError
from app.services.property_import_service import (
    EmptyCSVFileError,
    NoValidRecordsError,
    PropertyImportError,
    PropertyImportService,
    PropertyPersistenceError,
    get_property_import_service,
)

__all__ = [
    "CSVDecodeError",
    "EmptyCSVFileError",
    "NoValidRecordsError",
    "PropertyImportError",
    "PropertyImportService",
    "PropertyPersistenceError",
    "get_property_import_service",
]
