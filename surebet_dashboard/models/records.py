from __future__ import annotations

from dataclasses import dataclass

"""Record models for the aggregation pipeline.

NormalizedRecord is one wager line after parsing; Entry (a "grupo") is the
set of lines of one surebet: same bet date, same event and same operador.
"""

__all__ = [
    "NormalizedRecord",
    "Entry",
]


@dataclass(frozen=True)
class NormalizedRecord:
    """A single spreadsheet row with parsed values.

    Only rows with a valid bet date become records.
    """
    data_aposta: str  # YYYY-MM-DD
    operador: str
    casa: str
    esporte: str
    evento: str  # trimmed
    data_evento: str  # trimmed, kept as written
    stake: float
    lucro: float

    @property
    def entry_key(self) -> str:
        return f"{self.data_aposta}|{self.evento.lower().strip()}|{self.operador}"


@dataclass
class Entry:
    """A betting entry: records sharing (data_aposta, evento, operador)."""
    data_aposta: str
    operador: str
    evento: str
    esporte: str  # from the first contributing record
    lucro_total: float = 0.0
    stake_total: float = 0.0
