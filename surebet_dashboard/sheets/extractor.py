from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from .headers import DATA_APOSTA, canonical_header_name, normalize_header_text

"""Row extraction from a raw Google Sheets value grid.

Betting sheets usually carry a few title/summary rows above the real table,
so the header is not at a fixed position: it is the first row holding a cell
that reads "DATA APOSTA" (in any spelling that normalizes to it). Rows below
it that are not entirely blank become records keyed by canonical header name.

When several tabs of one spreadsheet are read, the header found in the first
tab is passed back in as ``main_header`` and reused for every later tab.
"""

__all__ = [
    "ExtractedTab",
    "find_header_index",
    "extract_rows",
]

logger = logging.getLogger(__name__)


@dataclass
class ExtractedTab:
    header: list[str] | None
    rows: list[dict[str, Any]] = field(default_factory=list)  # canonical name -> raw cell


def _grid_frame(values: Sequence[Sequence[Any]]) -> pd.DataFrame:
    # ragged rows are padded by pandas; missing cells read as ""
    frame = pd.DataFrame([list(row) for row in values], dtype=object)
    return frame.fillna("")


def find_header_index(frame: pd.DataFrame) -> int | None:
    """Position of the first row containing a DATA APOSTA cell, or None."""
    for idx, row in enumerate(frame.itertuples(index=False, name=None)):
        if any(DATA_APOSTA in normalize_header_text(cell) for cell in row):
            return idx
    return None


def extract_rows(
    values: Sequence[Sequence[Any]] | None,
    main_header: Sequence[str] | None = None,
) -> ExtractedTab:
    """Project a value grid into header -> value records.

    Steps:
    1. Locate the header row (first row with a DATA APOSTA cell)
    2. Canonicalize ``main_header`` when given, otherwise this tab's header row
    3. Keep rows below the header with at least one non-blank cell
    4. Map each kept row onto the header by column position

    A grid without a header row yields no rows and returns ``main_header``
    unchanged. Never raises on malformed cells.
    """
    passthrough = list(main_header) if main_header is not None else None
    if not values:
        return ExtractedTab(header=passthrough, rows=[])

    frame = _grid_frame(values)
    header_index = find_header_index(frame)
    if header_index is None:
        logger.warning("header 'DATA APOSTA' not found in tab")
        return ExtractedTab(header=passthrough, rows=[])

    header_source = main_header if main_header is not None else frame.iloc[header_index].tolist()
    header = [canonical_header_name(cell) for cell in header_source]

    data_part = frame.iloc[header_index + 1:]
    if data_part.empty:
        return ExtractedTab(header=header, rows=[])
    non_blank = data_part.astype(str).apply(lambda col: col.str.strip() != "").any(axis=1)
    data_part = data_part[non_blank]

    rows: list[dict[str, Any]] = []
    for raw in data_part.itertuples(index=False, name=None):
        record: dict[str, Any] = {}
        for idx, col in enumerate(header):
            if not col:
                continue
            record[col] = raw[idx] if idx < len(raw) else ""
        rows.append(record)

    return ExtractedTab(header=header, rows=rows)
