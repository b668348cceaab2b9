"""
tests/test_property_import_service.py

Pytest unit tests for PropertyImportService.

No database: persistence goes through an in-memory fake gateway that
records every batch it receives.

Coverage
--------
- Scenario rows (empty title, negative price, valid villa)
- Row numbering over data rows only
- Summary arithmetic (totalProcessed == successful + failed)
- Batching at the threshold, including the final partial batch
- Empty buffer, header-only and all-invalid files
- Decode-fatal files abort before any persistence call
- Gateway failure is fatal and stops further batches
- Enrichment with broker id, creation time and import id
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.domain.property_import import PropertyInput, StoredProperty
from app.services.csv_decoder import CSVDecodeError
from app.services.property_import_service import (
    EmptyCSVFileError,
    NoValidRecordsError,
    PropertyImportService,
    PropertyPersistenceError,
)
from db.repositories.errors import PersistenceGatewayError

HEADER = "title,price,projectId"
FIXED_NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


class FakeGateway:
    """Records batches; optionally fails on the N-th call (1-based)."""

    def __init__(self, *, fail_on_call: int | None = None) -> None:
        self.calls: list[list[PropertyInput]] = []
        self._fail_on_call = fail_on_call
        self._next_id = 1

    def insert_many(self, records: Sequence[PropertyInput]) -> list[StoredProperty]:
        self.calls.append(list(records))
        if self._fail_on_call == len(self.calls):
            raise PersistenceGatewayError("connection reset")
        stored = []
        for record in records:
            stored.append(StoredProperty(id=self._next_id, record=record))
            self._next_id += 1
        return stored

    @property
    def batch_sizes(self) -> list[int]:
        return [len(batch) for batch in self.calls]


def _csv(*lines: str, header: str = HEADER) -> bytes:
    return ("\n".join((header, *lines)) + "\n").encode("utf-8")


def _valid_rows(count: int) -> list[str]:
    return [f"Unit {index},{1000 + index},p1" for index in range(count)]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def service() -> PropertyImportService:
    return PropertyImportService(batch_size=1000, log_validation_errors=False, clock=lambda: FIXED_NOW)


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


# ---------------------------------------------------------------------------
# Row handling
# ---------------------------------------------------------------------------


class TestRowHandling:
    def test_scenario_rows(self, service: PropertyImportService, gateway: FakeGateway) -> None:
        data = _csv('"",100,p1', "Ok,-5,p1", "Villa,500000,p1")

        summary = service.import_properties(file_bytes=data, broker_id="broker_123", gateway=gateway)

        assert [error.message for error in summary.validation_errors] == [
            "title is required",
            "price must be a positive number",
        ]
        assert gateway.batch_sizes == [1]
        stored = gateway.calls[0][0]
        assert (stored.title, stored.price, stored.project_id) == ("Villa", Decimal("500000"), "p1")

    def test_row_numbers_count_data_rows_from_one(
        self,
        service: PropertyImportService,
        gateway: FakeGateway,
    ) -> None:
        data = _csv(",1,p1", "Good,1,p1", "Bad,0,p1", "Good,2,p2", "Worse,x,p1")

        summary = service.import_properties(file_bytes=data, broker_id="b", gateway=gateway)

        assert [error.row_number for error in summary.validation_errors] == [1, 3, 5]

    def test_row_error_keeps_raw_data(self, service: PropertyImportService, gateway: FakeGateway) -> None:
        data = _csv("Villa,-1,p1,sea view", "Ok,1,p1", header="title,price,projectId,notes")

        summary = service.import_properties(file_bytes=data, broker_id="b", gateway=gateway)

        assert summary.validation_errors[0].raw_data == {
            "title": "Villa",
            "price": "-1",
            "projectId": "p1",
            "notes": "sea view",
        }

    def test_summary_counts_add_up(self, service: PropertyImportService, gateway: FakeGateway) -> None:
        data = _csv(*_valid_rows(7), ",1,p1", "x,0,p1", "y,1,")

        summary = service.import_properties(file_bytes=data, broker_id="b", gateway=gateway)

        assert summary.total_processed == 10
        assert summary.successful == 7
        assert summary.failed == 3
        assert summary.total_processed == summary.successful + summary.failed
        assert summary.processing_time_ms >= 0

    def test_records_are_enriched_with_upload_metadata(
        self,
        service: PropertyImportService,
        gateway: FakeGateway,
    ) -> None:
        summary = service.import_properties(file_bytes=_csv(*_valid_rows(3)), broker_id="broker_123", gateway=gateway)

        records = gateway.calls[0]
        assert {record.broker_id for record in records} == {"broker_123"}
        assert {record.created_at for record in records} == {FIXED_NOW}
        assert {record.import_id for record in records} == {summary.import_id}

    def test_each_run_gets_its_own_import_id(self, service: PropertyImportService) -> None:
        first = service.import_properties(file_bytes=_csv("A,1,p1"), broker_id="b", gateway=FakeGateway())
        second = service.import_properties(file_bytes=_csv("A,1,p1"), broker_id="b", gateway=FakeGateway())

        assert isinstance(first.import_id, uuid.UUID)
        assert first.import_id != second.import_id


# ---------------------------------------------------------------------------
# Batching
# ---------------------------------------------------------------------------


class TestBatching:
    def test_flushes_at_threshold_and_final_partial_batch(
        self,
        service: PropertyImportService,
        gateway: FakeGateway,
    ) -> None:
        summary = service.import_properties(file_bytes=_csv(*_valid_rows(2500)), broker_id="b", gateway=gateway)

        assert gateway.batch_sizes == [1000, 1000, 500]
        assert summary.successful == 2500
        assert [record.title for record in gateway.calls[0][:2]] == ["Unit 0", "Unit 1"]
        assert gateway.calls[2][-1].title == "Unit 2499"

    def test_exact_multiple_has_no_trailing_empty_batch(
        self,
        service: PropertyImportService,
        gateway: FakeGateway,
    ) -> None:
        service.import_properties(file_bytes=_csv(*_valid_rows(2000)), broker_id="b", gateway=gateway)

        assert gateway.batch_sizes == [1000, 1000]

    def test_invalid_rows_do_not_count_towards_batch(self, gateway: FakeGateway) -> None:
        service = PropertyImportService(batch_size=2, log_validation_errors=False)
        data = _csv("A,1,p1", "bad,0,p1", "B,1,p1", "C,1,p1")

        service.import_properties(file_bytes=data, broker_id="b", gateway=gateway)

        assert [[record.title for record in batch] for batch in gateway.calls] == [["A", "B"], ["C"]]

    def test_batch_size_is_at_least_one(self) -> None:
        assert PropertyImportService(batch_size=0).batch_size == 1


# ---------------------------------------------------------------------------
# Rejections and fatal failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_empty_buffer_is_rejected_before_decoding(
        self,
        service: PropertyImportService,
        gateway: FakeGateway,
    ) -> None:
        with pytest.raises(EmptyCSVFileError):
            service.import_properties(file_bytes=b"", broker_id="b", gateway=gateway)

        assert gateway.calls == []

    def test_all_invalid_rows_raise_without_persisting(
        self,
        service: PropertyImportService,
        gateway: FakeGateway,
    ) -> None:
        data = _csv(",1,p1", "Ok,-5,p1", "Ok,1,")

        with pytest.raises(NoValidRecordsError) as excinfo:
            service.import_properties(file_bytes=data, broker_id="b", gateway=gateway)

        assert gateway.calls == []
        summary = excinfo.value.summary
        assert summary.successful == 0
        assert summary.failed == 3
        assert summary.total_processed == 3
        assert len(excinfo.value.validation_errors) == 3

    def test_header_only_file_has_no_valid_records(
        self,
        service: PropertyImportService,
        gateway: FakeGateway,
    ) -> None:
        with pytest.raises(NoValidRecordsError) as excinfo:
            service.import_properties(file_bytes=_csv(), broker_id="b", gateway=gateway)

        assert excinfo.value.summary.total_processed == 0
        assert gateway.calls == []

    def test_decode_error_aborts_before_any_batch(
        self,
        service: PropertyImportService,
        gateway: FakeGateway,
    ) -> None:
        data = _csv(*_valid_rows(1500), '"unterminated,1,p1')

        with pytest.raises(CSVDecodeError):
            service.import_properties(file_bytes=data, broker_id="b", gateway=gateway)

        assert gateway.calls == []

    def test_gateway_failure_is_fatal(self, service: PropertyImportService) -> None:
        gateway = FakeGateway(fail_on_call=2)

        with pytest.raises(PropertyPersistenceError) as excinfo:
            service.import_properties(file_bytes=_csv(*_valid_rows(3500)), broker_id="b", gateway=gateway)

        assert gateway.batch_sizes == [1000, 1000]
        assert excinfo.value.persisted == 1000
        assert isinstance(excinfo.value.__cause__, PersistenceGatewayError)

    def test_gateway_failure_on_final_batch_is_fatal(self, service: PropertyImportService) -> None:
        gateway = FakeGateway(fail_on_call=1)

        with pytest.raises(PropertyPersistenceError) as excinfo:
            service.import_properties(file_bytes=_csv("A,1,p1"), broker_id="b", gateway=gateway)

        assert excinfo.value.persisted == 0
