from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for isolated spreadsheet read failures.

When one tab of a multi-tab spreadsheet cannot be read, the tab is skipped
and an ErrorRecord is written to the WARN log as a single JSON line so the
failure stays machine-readable next to the human log output.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        spreadsheet: Google spreadsheet id being read
        tab: Tab (worksheet) title; empty when the failure is not tab-specific
        range: A1 range that was requested
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Upstream error message
    """
    timestamp: str  # ISO8601 UTC
    spreadsheet: str
    tab: str
    range: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(spreadsheet: str, tab: str, range: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            spreadsheet=spreadsheet,
            tab=tab,
            range=range,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line (fixed keys, no extras)."""
        return json.dumps(asdict(self), ensure_ascii=False)
