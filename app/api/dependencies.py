"""
app/api/dependencies.py

Shared FastAPI dependencies for upload intake and caller identity.
"""

from __future__ import annotations

from fastapi import Depends, File, Header, UploadFile, status
from sqlalchemy.orm import Session

from app.api.errors import reject
from app.repositories.property_repository import PropertyGateway, PropertyRepository
from db.session import get_db

UPLOAD_FIELD_NAME = "properties-csv"

CSV_CONTENT_TYPES = {
    "text/csv",
}


def get_csv_upload(
    file: UploadFile | None = File(default=None, alias=UPLOAD_FIELD_NAME),
) -> UploadFile:
    """
    Require one uploaded file with the CSV content type.
    """

    if file is None:
        raise reject(status.HTTP_400_BAD_REQUEST, "No CSV file provided")

    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()
    if content_type not in CSV_CONTENT_TYPES:
        raise reject(status.HTTP_400_BAD_REQUEST, "Only CSV files are allowed")

    return file


def read_csv_bytes(file: UploadFile, *, max_bytes: int) -> bytes:
    """
    Read the whole upload, refusing anything larger than ``max_bytes``.
    """

    data = file.file.read(max_bytes + 1)
    if len(data) > max_bytes:
        megabytes = max(1, max_bytes // (1024 * 1024))
        raise reject(
            status.HTTP_400_BAD_REQUEST,
            f"File too large. Maximum size is {megabytes}MB",
        )
    return data


def get_broker_id(x_broker_id: str | None = Header(default=None)) -> str:
    """
    Opaque caller identity set by the authentication layer in front of the API.
    """

    broker_id = (x_broker_id or "").strip()
    if not broker_id:
        raise reject(status.HTTP_401_UNAUTHORIZED, "Missing caller identity")
    return broker_id


def get_property_gateway(db: Session = Depends(get_db)) -> PropertyGateway:
    return PropertyRepository(db)
