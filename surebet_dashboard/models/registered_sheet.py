from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

"""RegisteredSheet model: one row of the ``sheets`` registry table."""

__all__ = [
    "RegisteredSheet",
    "NO_OPERATOR",
]

NO_OPERATOR = "SEM OPERADOR"


@dataclass(frozen=True)
class RegisteredSheet:
    """A spreadsheet registered for the dashboard.

    Immutable once created; the cache refers to it by ``id`` only.
    """
    id: int
    name: str  # display name, used as operador
    google_sheet_id: str  # the id between /d/ and /edit in the sheet URL
    range: str  # "TAB!A1:Z1000" or bare "A1:Z1000" for all tabs
    created_at: datetime | str | None = None

    @property
    def operador(self) -> str:
        return (self.name or "").strip() or NO_OPERATOR

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> RegisteredSheet:
        return cls(
            id=int(row["id"]),
            name=row["name"],
            google_sheet_id=row["google_sheet_id"],
            range=row["range"],
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        created = self.created_at.isoformat() if isinstance(self.created_at, datetime) else self.created_at
        return {
            "id": self.id,
            "name": self.name,
            "google_sheet_id": self.google_sheet_id,
            "range": self.range,
            "created_at": created,
        }
