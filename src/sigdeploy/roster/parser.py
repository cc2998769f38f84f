"""Roster parser — raw tabular bytes to a typed ``Roster``.

Accepts an xlsx workbook (first worksheet) or delimited text. Columns are
mapped by position only; the header row is never consulted.

Layout:
  version cell (default A1)   "Version:<token>"
  row 2                       header, ignored
  row 3..                     one user per row, 18 columns
"""

from __future__ import annotations

import csv
import io
import logging
import re
from typing import Any, Iterable, Sequence

import openpyxl
from openpyxl.utils.cell import coordinate_from_string, column_index_from_string

from sigdeploy.core.config import AppSettings
from sigdeploy.core.exceptions import (
    DuplicateIdentity,
    EmptyRoster,
    MalformedRoster,
    MalformedVersionCell,
    TruncatedRow,
)
from sigdeploy.local.naming import is_valid_version
from sigdeploy.models.roster import Roster, RosterRecord, RosterVersion
from sigdeploy.roster.normalize import (
    cell_text,
    normalize_company,
    normalize_country,
    parse_flag,
)

logger = logging.getLogger(__name__)

_VERSION_PREFIX = re.compile(r"^\s*version\s*:\s*(?P<token>.*?)\s*$", re.IGNORECASE)
_XLSX_MAGIC = b"PK\x03\x04"
_FLAG_FIELDS = {"setAsNewDefault", "setAsReplyDefault"}
_DELIMITERS = (",", ";", "\t")


def parse_version(value: object, cell: str = "A1") -> RosterVersion:
    """Strip the ``Version:`` prefix from a version cell value.

    The token becomes part of artifact file names, so path separators,
    parentheses and characters Windows forbids in file names are rejected.
    """
    if value is None:
        raise MalformedVersionCell(cell, value)
    match = _VERSION_PREFIX.match(cell_text(value))
    if match is None or not is_valid_version(match.group("token")):
        raise MalformedVersionCell(cell, value)
    return RosterVersion(token=match.group("token"))


def parse_roster(data: bytes, settings: AppSettings) -> Roster:
    """Parse roster bytes into a version and its records.

    Raises:
        MalformedVersionCell: version cell missing, without prefix, or
            holding a token unusable in file names.
        TruncatedRow: a non-blank row with fewer fields than the contract.
        DuplicateIdentity: two rows share an identity.
        EmptyRoster: no data rows.
    """
    rows = _read_rows(data)
    col, row = _cell_position(settings.roster.version_cell)
    version = parse_version(_cell(rows, row, col), settings.roster.version_cell)

    columns = settings.signature.columns
    start = settings.roster.data_start_row
    records: list[RosterRecord] = []
    seen: dict[str, int] = {}
    data_rows = 0

    for row_number, raw in enumerate(rows[start - 1:], start=start):
        if _is_blank(raw):
            continue
        data_rows += 1
        if len(raw) < len(columns):
            raise TruncatedRow(row_number, len(raw), len(columns))
        record = _build_record(raw, columns, settings)
        if record is None:
            logger.warning("Row %d has no identity, skipped", row_number)
            continue
        key = record.identity.casefold()
        if key in seen:
            raise DuplicateIdentity(record.identity, row_number)
        seen[key] = row_number
        records.append(record)

    if data_rows == 0:
        raise EmptyRoster("Roster has no data rows")

    logger.info("Parsed roster version %s with %d records", version, len(records))
    return Roster(version=version, records=tuple(records))


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _read_rows(data: bytes) -> list[tuple[Any, ...]]:
    if data.startswith(_XLSX_MAGIC):
        return _read_xlsx(data)
    return _read_delimited(data)


def _read_xlsx(data: bytes) -> list[tuple[Any, ...]]:
    try:
        wb = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except Exception as exc:
        raise MalformedRoster(f"Roster workbook unreadable: {exc}") from exc
    try:
        ws = wb.worksheets[0]
        return [tuple(row) for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()


def _read_delimited(data: bytes) -> list[tuple[Any, ...]]:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedRoster(f"Roster is neither xlsx nor UTF-8 text: {exc}") from exc
    sample = text[:4096]
    delimiter = max(_DELIMITERS, key=sample.count)
    return [tuple(row) for row in csv.reader(io.StringIO(text), delimiter=delimiter)]


def _cell_position(coordinate: str) -> tuple[int, int]:
    letters, row = coordinate_from_string(coordinate)
    return column_index_from_string(letters), row


def _cell(rows: list[tuple[Any, ...]], row: int, col: int) -> Any:
    if row > len(rows) or col > len(rows[row - 1]):
        return None
    return rows[row - 1][col - 1]


def _is_blank(row: Iterable[Any]) -> bool:
    return all(cell_text(v) == "" for v in row)


def _build_record(
    raw: Sequence[Any], columns: Sequence[str], settings: AppSettings
) -> RosterRecord | None:
    values: dict[str, Any] = {}
    for name, value in zip(columns, raw):
        values[name] = parse_flag(value) if name in _FLAG_FIELDS else cell_text(value)

    if not values.get("identity"):
        return None

    values["country"] = normalize_country(
        values.get("country", ""), settings.signature.fallback_country
    )
    values["companyName"] = normalize_company(values.get("companyName", ""))
    return RosterRecord.model_validate(values)
