from __future__ import annotations

import math
import re
from typing import Any

"""Parsers for Brazilian-formatted spreadsheet values.

Both parsers are total: malformed input degrades to 0 / None instead of
raising, so a single bad cell never breaks a dashboard request.
"""

__all__ = [
    "parse_number",
    "parse_date_iso",
]

_CURRENCY_RE = re.compile(r"R\$", re.IGNORECASE)
_SPACES_RE = re.compile(r"[\s\u00a0]")
_DATE_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})\Z", re.ASCII)
# ASCII decimal notation with an optional exponent
_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\Z", re.ASCII)


def parse_number(value: Any) -> float:
    """Convert ``"R$ 1.080,00"`` style text (or a number) to a float.

    ``.`` is the thousands separator and ``,`` the decimal separator.
    Returns 0 for None, NaN and anything that does not parse.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return 0 if isinstance(value, float) and math.isnan(value) else value

    text = _CURRENCY_RE.sub("", str(value))
    text = _SPACES_RE.sub("", text)
    text = text.replace(".", "").replace(",", ".")
    if not _DECIMAL_RE.match(text):
        return 0
    number = float(text)
    return number if math.isfinite(number) else 0


def parse_date_iso(value: Any) -> str | None:
    """``"03/11/2025 22:29:54"`` -> ``"2025-11-03"``.

    Only the shape DD/MM/YYYY is checked, not calendar validity:
    ``"32/13/2025"`` becomes ``"2025-13-32"``.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    date_part = text.split(" ")[0]
    m = _DATE_RE.match(date_part)
    if m is None:
        return None
    day, month, year = m.groups()
    return f"{year}-{month}-{day}"
