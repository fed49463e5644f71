from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.registered_sheet import RegisteredSheet

"""Progress display for CLI reports (tqdm, TTY only).

In non-TTY environments (CI, redirected output) no bar is drawn so the JSON
report on stdout stays clean.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """True when stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress bar over the registered sheets read by a report."""

    def __init__(self, total_sheets: int, *, description: str = "Reading sheets") -> None:
        self.total_sheets = total_sheets
        self.description = description
        self.done = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_sheets,
                desc=description,
                unit="sheet",
                leave=True,
                ncols=80,
                ascii=True,
                file=sys.stderr,
            )
        else:
            self.pbar = None

    def sheet_done(self, sheet: RegisteredSheet) -> None:
        """Callback for ``overview_for_all``: one more sheet read (or skipped)."""
        self.done += 1
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(sheet=sheet.operador)
            self.pbar.update(1)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
