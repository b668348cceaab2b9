"""
tests/test_property_repository.py

Pytest unit tests for PropertyRepository.

The SQLAlchemy session is replaced with a stub that hands back generated ids
or raises, and counts commits and rollbacks.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from app.domain.property_import import PropertyInput, StoredProperty
from app.repositories.property_repository import PropertyRepository
from db.repositories.errors import PersistenceGatewayError

IMPORT_ID = uuid.UUID("00000000-0000-0000-0000-000000000042")
CREATED_AT = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


class _ScalarResult:
    def __init__(self, values: list[int]) -> None:
        self._values = values

    def all(self) -> list[int]:
        return list(self._values)


class StubSession:
    def __init__(self, *, ids: list[int] | None = None, error: SQLAlchemyError | None = None) -> None:
        self.ids = ids or []
        self.error = error
        self.statements: list = []
        self.commits = 0
        self.rollbacks = 0

    def scalars(self, statement):
        self.statements.append(statement)
        if self.error is not None:
            raise self.error
        return _ScalarResult(self.ids)

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


def _record(title: str, price: str = "100", project_id: str = "p1") -> PropertyInput:
    return PropertyInput(
        title=title,
        price=Decimal(price),
        project_id=project_id,
        broker_id="broker_123",
        created_at=CREATED_AT,
        import_id=IMPORT_ID,
    )


class TestInsertMany:
    def test_empty_batch_does_not_touch_the_session(self) -> None:
        session = StubSession(ids=[1])

        stored = PropertyRepository(session).insert_many([])

        assert stored == []
        assert session.statements == []
        assert session.commits == 0
        assert session.rollbacks == 0

    def test_pairs_generated_ids_with_records_in_order(self) -> None:
        records = [_record("Villa", "500000"), _record("Flat", "1000", "p2"), _record("Loft", "750", "p3")]
        session = StubSession(ids=[7, 8, 9])

        stored = PropertyRepository(session).insert_many(records)

        assert stored == [
            StoredProperty(id=7, record=records[0]),
            StoredProperty(id=8, record=records[1]),
            StoredProperty(id=9, record=records[2]),
        ]
        assert session.commits == 1
        assert session.rollbacks == 0

    def test_issues_one_multi_row_insert_returning_ids(self) -> None:
        session = StubSession(ids=[1, 2])

        PropertyRepository(session).insert_many([_record("Villa"), _record("Flat")])

        assert len(session.statements) == 1
        sql = str(session.statements[0].compile(dialect=postgresql.dialect()))
        assert sql.startswith("INSERT INTO properties")
        assert "RETURNING properties.id" in sql

    def test_database_error_rolls_back_and_is_translated(self) -> None:
        cause = OperationalError("INSERT INTO properties ...", {}, Exception("connection lost"))
        session = StubSession(error=cause)

        with pytest.raises(PersistenceGatewayError) as exc_info:
            PropertyRepository(session).insert_many([_record("Villa"), _record("Flat")])

        assert exc_info.value.__cause__ is cause
        assert "batch of 2 properties" in str(exc_info.value)
        assert session.rollbacks == 1
        assert session.commits == 0

    def test_commit_failure_rolls_back(self) -> None:
        session = StubSession(ids=[1])

        def failing_commit() -> None:
            raise SQLAlchemyError("commit failed")

        session.commit = failing_commit

        with pytest.raises(PersistenceGatewayError):
            PropertyRepository(session).insert_many([_record("Villa")])

        assert session.rollbacks == 1
