"""
app/services/csv_decoder.py

Streaming decoder turning an uploaded CSV buffer into raw row mappings.

The first non-blank line is the header. Each following line is yielded as
a ``RawRecord`` as soon as it is read, so callers can apply batching before
more input is consumed. Encoding and quoting errors are fatal for the whole
file: once framing is lost no later row position can be trusted.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterator
from contextlib import contextmanager

from app.domain.property_import import RawRecord

CSV_ENCODING = "utf-8-sig"


class CSVDecodeError(ValueError):
    """
    Raised when the CSV buffer is not valid UTF-8 or its quoting is broken.
    """

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number


def iter_records(data: bytes) -> Iterator[RawRecord]:
    """
    Lazily decode ``data`` into one mapping per data line, in file order.

    Header names are stripped of surrounding whitespace. Cells beyond the
    header width are kept under ``_<index>`` keys; missing trailing cells
    are filled with empty strings. Blank lines are skipped.
    """

    with _csv_rows(data) as rows:
        headers: list[str] | None = None
        for cells in rows:
            if not cells:
                continue
            if headers is None:
                headers = [cell.strip() for cell in cells]
                continue
            yield _to_record(headers, cells)


def check_framing(data: bytes) -> None:
    """
    Read the whole buffer once, discarding rows, and raise ``CSVDecodeError``
    if it cannot be decoded. Memory use does not grow with file size.
    """

    with _csv_rows(data) as rows:
        for _ in rows:
            pass


@contextmanager
def _csv_rows(data: bytes) -> Iterator[Iterator[list[str]]]:
    text_stream = io.TextIOWrapper(io.BytesIO(data), encoding=CSV_ENCODING, newline="")
    reader = csv.reader(text_stream, strict=True)
    try:
        yield _guarded(reader)
    finally:
        text_stream.close()


def _guarded(reader: Iterator[list[str]]) -> Iterator[list[str]]:
    try:
        yield from reader
    except UnicodeDecodeError as exc:
        raise CSVDecodeError(
            "CSV must be UTF-8 encoded.",
            line_number=getattr(reader, "line_num", None),
        ) from exc
    except csv.Error as exc:
        line_number = getattr(reader, "line_num", None)
        raise CSVDecodeError(
            f"Invalid CSV format near line {line_number}: {exc}",
            line_number=line_number,
        ) from exc


def _to_record(headers: list[str], cells: list[str]) -> RawRecord:
    record: RawRecord = {}
    for index, header in enumerate(headers):
        record[header] = cells[index] if index < len(cells) else ""
    for index in range(len(headers), len(cells)):
        record[f"_{index}"] = cells[index]
    return record
