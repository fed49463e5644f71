from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from ..models.records import NormalizedRecord
from ..sheets.headers import CASA, DATA_APOSTA, DATA_EVENTO, ESPORTE, EVENTO, LUCRO, STAKE
from ..sheets.parsers import parse_date_iso, parse_number

"""Conversion of extracted rows into NormalizedRecord plus request filters."""

__all__ = [
    "to_record",
    "within_range",
    "records_from_rows",
]


def _text(row: Mapping[str, Any], column: str) -> str:
    value = row.get(column)
    if value is None:
        return ""
    return str(value)


def to_record(row: Mapping[str, Any], operador: str) -> NormalizedRecord | None:
    """Parse one header -> value row; None when DATA APOSTA is not a valid date."""
    data_aposta = parse_date_iso(row.get(DATA_APOSTA))
    if not data_aposta:
        return None
    return NormalizedRecord(
        data_aposta=data_aposta,
        operador=operador,
        casa=_text(row, CASA),
        esporte=_text(row, ESPORTE),
        evento=_text(row, EVENTO).strip(),
        data_evento=_text(row, DATA_EVENTO).strip(),
        stake=parse_number(row.get(STAKE)),
        lucro=parse_number(row.get(LUCRO)),
    )


def within_range(record: NormalizedRecord, date_from: str | None, date_to: str | None) -> bool:
    """Inclusive ISO-date bounds compared as strings; blank bounds are ignored."""
    if date_from and record.data_aposta < date_from:
        return False
    if date_to and record.data_aposta > date_to:
        return False
    return True


def records_from_rows(
    rows: Iterable[Mapping[str, Any]],
    operador: str,
    date_from: str | None = None,
    date_to: str | None = None,
) -> list[NormalizedRecord]:
    records: list[NormalizedRecord] = []
    for row in rows:
        record = to_record(row, operador)
        if record is None:
            continue
        if not within_range(record, date_from, date_to):
            continue
        records.append(record)
    return records
