"""
app/repositories/property_repository.py

Persistence gateway for bulk-imported property listings.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.property_import import PropertyInput, StoredProperty
from db.models.property import Property
from db.repositories.errors import PersistenceGatewayError

logger = logging.getLogger(__name__)


class PropertyGateway(Protocol):
    """
    Anything that can durably store one batch of validated properties.
    """

    def insert_many(self, records: Sequence[PropertyInput]) -> list[StoredProperty]:
        ...


class PropertyRepository:
    """
    Stores property batches with one PostgreSQL multi-row INSERT per call.

    Every call commits on its own, so batches stored before a later failure
    stay persisted.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def insert_many(self, records: Sequence[PropertyInput]) -> list[StoredProperty]:
        if not records:
            return []

        payloads: list[dict[str, Any]] = [
            {
                "title": record.title,
                "price": record.price,
                "project_id": record.project_id,
                "broker_id": record.broker_id,
                "import_id": record.import_id,
                "created_at": record.created_at,
            }
            for record in records
        ]
        stmt = insert(Property).values(payloads).returning(Property.id)

        try:
            ids = list(self._session.scalars(stmt).all())
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise PersistenceGatewayError(
                f"Failed to insert batch of {len(records)} properties."
            ) from exc

        logger.info("Inserted %d properties", len(ids))
        return [StoredProperty(id=row_id, record=record) for row_id, record in zip(ids, records)]
