from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from ..logging.init import log_summary
from ..models.dashboard_stats import DashboardStats
from ..models.records import NormalizedRecord
from ..models.registered_sheet import RegisteredSheet
from .aggregator import build_stats, group_entries
from .cache import RowsLoader, SheetRowsCache
from .records import records_from_rows
from .summary import render_summary_line

"""Dashboard orchestration: cached rows -> records -> entries -> statistics.

Two scopes:
- one sheet: ``operador`` must equal that sheet's operador, otherwise the
  result is empty
- all sheets: sheets whose operador differs from ``operador`` are skipped
  entirely; the rest are read one after another and grouped together

Both log a SUMMARY line per computation.
"""

__all__ = [
    "overview_for_sheet",
    "overview_for_all",
]

logger = logging.getLogger(__name__)


def _finish(scope: str, sheets: int, records: list[NormalizedRecord], started: float) -> DashboardStats:
    stats = build_stats(records, group_entries(records))
    line = render_summary_line(scope, sheets, len(records), stats, time.perf_counter() - started)
    log_summary(line.removeprefix("SUMMARY "))
    return stats


async def overview_for_sheet(
    sheet: RegisteredSheet,
    cache: SheetRowsCache,
    loader: RowsLoader,
    operador: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
) -> DashboardStats:
    """Statistics for a single registered sheet."""
    started = time.perf_counter()
    records: list[NormalizedRecord] = []
    if operador and sheet.operador != operador:
        logger.debug(f"sheet={sheet.id} operador={sheet.operador!r} filtered out by {operador!r}")
    else:
        rows = await cache.get_rows(sheet, loader)
        records = records_from_rows(rows, sheet.operador, date_from, date_to)
    return _finish(f"sheet:{sheet.id}", 1, records, started)


async def overview_for_all(
    sheets: Sequence[RegisteredSheet],
    cache: SheetRowsCache,
    loader: RowsLoader,
    operador: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    on_sheet: Callable[[RegisteredSheet], None] | None = None,
) -> DashboardStats:
    """Statistics over every registered sheet, grouped across sheets.

    ``on_sheet`` is called after each sheet has been read (progress display).
    """
    started = time.perf_counter()
    records: list[NormalizedRecord] = []
    used = 0
    for sheet in sheets:
        if operador and sheet.operador != operador:
            if on_sheet is not None:
                on_sheet(sheet)
            continue
        rows = await cache.get_rows(sheet, loader)
        records.extend(records_from_rows(rows, sheet.operador, date_from, date_to))
        used += 1
        if on_sheet is not None:
            on_sheet(sheet)
    return _finish("all", used, records, started)
