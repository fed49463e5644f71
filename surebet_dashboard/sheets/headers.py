from __future__ import annotations

import re
import unicodedata
from typing import Any

"""Header canonicalization for betting spreadsheets.

Operators label their columns freely ("Data da Aposta", "Bookmaker",
"Partida", ...). Everything downstream only reads the canonical names below,
so each header cell is mapped onto that vocabulary; unknown labels are kept
as written (trimmed).
"""

__all__ = [
    "DATA_APOSTA",
    "LUCRO",
    "STAKE",
    "CASA",
    "ESPORTE",
    "DATA_EVENTO",
    "EVENTO",
    "CANONICAL_HEADERS",
    "normalize_header_text",
    "canonical_header_name",
]

DATA_APOSTA = "DATA APOSTA"
LUCRO = "LUCRO"
STAKE = "STAKE"
CASA = "CASA"
ESPORTE = "ESPORTE"
DATA_EVENTO = "DATA EVENTO"
EVENTO = "EVENTO"

CANONICAL_HEADERS = (DATA_APOSTA, LUCRO, STAKE, CASA, ESPORTE, DATA_EVENTO, EVENTO)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_header_text(value: Any) -> str:
    """Uppercase, strip accents, collapse whitespace and trim a cell value."""
    if value is None:
        return ""
    text = unicodedata.normalize("NFD", str(value).upper())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return _WHITESPACE_RE.sub(" ", text).strip()


def canonical_header_name(raw: Any) -> str:
    """Map a raw header cell to its canonical column name.

    Rules are checked in order and the first match wins. A cell that matches
    nothing keeps its original text, trimmed.
    """
    n = normalize_header_text(raw)

    if DATA_APOSTA in n:
        return DATA_APOSTA
    if n == LUCRO:
        return LUCRO
    if n == STAKE:
        return STAKE
    if n == CASA or "BOOK" in n:
        return CASA
    if n in (ESPORTE, "ESPORTES"):
        return ESPORTE
    if DATA_EVENTO in n or "DATA JOGO" in n:
        return DATA_EVENTO
    if n in (EVENTO, "PARTIDA") or "MATCH" in n:
        return EVENTO

    return "" if raw is None else str(raw).strip()
