"""
db/models/property.py

Property listing rows written by the CSV bulk import.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Integer, Numeric, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    project_id: Mapped[str] = mapped_column(String(50), nullable=False)
    broker_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Identity of the broker who uploaded the row",
    )
    import_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        nullable=True,
        comment="Bulk import run that created the row",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_properties_project_id", "project_id"),
        Index("ix_properties_broker_id", "broker_id"),
        Index("ix_properties_import_id", "import_id"),
    )
