from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from ..models.registered_sheet import RegisteredSheet

"""In-memory cache of fetched spreadsheet rows.

Keyed by RegisteredSheet.id. There is no expiry: entries live until a
registration is added (clear all), the sheet is deleted (drop that key) or a
refresh is requested (clear all).

One instance lives on the FastAPI application state and is handed to the
request handlers.
"""

__all__ = [
    "CacheEntry",
    "SheetRowsCache",
    "RowsLoader",
]

logger = logging.getLogger(__name__)

RowsLoader = Callable[[str, str], Awaitable[list[dict[str, Any]]]]


@dataclass(frozen=True)
class CacheEntry:
    rows: list[dict[str, Any]]
    updated_at: datetime


class SheetRowsCache:
    """Sheet id -> last fetched rows.

    Concurrent misses for the same sheet may both fetch; the later write wins.
    A fetch that was running when its key was invalidated (or the cache
    cleared) is returned to its caller but not stored.
    """

    def __init__(self) -> None:
        self._entries: dict[int, CacheEntry] = {}
        # bumped by clear() / invalidate(); checked before storing a fetch
        self._epoch = 0
        self._generations: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, sheet_id: object) -> bool:
        return sheet_id in self._entries

    def get(self, sheet_id: int) -> CacheEntry | None:
        return self._entries.get(sheet_id)

    def put(self, sheet_id: int, rows: list[dict[str, Any]]) -> CacheEntry:
        entry = CacheEntry(rows=rows, updated_at=datetime.now(UTC))
        self._entries[sheet_id] = entry
        return entry

    def invalidate(self, sheet_id: int) -> None:
        self._entries.pop(sheet_id, None)
        self._generations[sheet_id] = self._generations.get(sheet_id, 0) + 1

    def clear(self) -> None:
        self._entries.clear()
        self._epoch += 1

    def snapshot(self) -> list[dict[str, Any]]:
        """Cache status for diagnostics: sheet id, row count, last update."""
        return [
            {
                "sheetId": sheet_id,
                "rows": len(entry.rows),
                "updatedAt": entry.updated_at.isoformat().replace("+00:00", "Z"),
            }
            for sheet_id, entry in sorted(self._entries.items())
        ]

    def _stamp(self, sheet_id: int) -> tuple[int, int]:
        return self._epoch, self._generations.get(sheet_id, 0)

    async def get_rows(self, sheet: RegisteredSheet, loader: RowsLoader) -> list[dict[str, Any]]:
        """Cached rows for ``sheet``; on a miss ``loader`` is awaited and stored."""
        cached = self._entries.get(sheet.id)
        if cached is not None:
            return cached.rows

        logger.info(f"cache miss: sheet={sheet.id} range={sheet.range}")
        stamp = self._stamp(sheet.id)
        rows = await loader(sheet.google_sheet_id, sheet.range)
        if self._stamp(sheet.id) == stamp:
            self.put(sheet.id, rows)
        else:
            logger.info(f"cache: sheet={sheet.id} invalidated during fetch, not stored")
        return rows
