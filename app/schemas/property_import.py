"""
app/schemas/property_import.py

Response schemas for the property CSV import endpoint. Field names are
serialized in camelCase.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PropertyRowErrorResponse(_CamelModel):
    """
    One rejected CSV row.
    """

    row: int = Field(..., ge=1)
    data: dict[str, str]
    error: str


class ImportSummaryResponse(_CamelModel):
    total_processed: int = Field(..., ge=0)
    successful: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    processing_time_ms: int = Field(..., ge=0)


class PropertyImportResponse(_CamelModel):
    """
    Body of an accepted import. ``validation_errors`` is omitted when every
    row was valid.
    """

    success: bool
    message: str
    summary: ImportSummaryResponse
    validation_errors: list[PropertyRowErrorResponse] | None = None


class ImportRejectedResponse(_CamelModel):
    """
    JSON body of a rejected import.
    """

    success: bool = False
    error: str
    message: str | None = None
    summary: ImportSummaryResponse | None = None
    validation_errors: list[PropertyRowErrorResponse] | None = None
