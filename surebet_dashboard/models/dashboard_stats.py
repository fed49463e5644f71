from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Statistics result models returned by the dashboard endpoints.

Python attributes are snake_case; ``to_dict`` produces the JSON wire names
the dashboard front end reads.
"""

__all__ = [
    "Overview",
    "DailyProfit",
    "Breakdown",
    "DashboardStats",
]


@dataclass(frozen=True)
class Overview:
    total_lucro: float
    total_stake: float
    total_apostas: int  # number of entries, not records
    yield_percent: float
    green_percent: float
    red_percent: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalLucro": self.total_lucro,
            "totalStake": self.total_stake,
            "totalApostas": self.total_apostas,
            "yieldPercent": self.yield_percent,
            "greenPercent": self.green_percent,
            "redPercent": self.red_percent,
        }


@dataclass(frozen=True)
class DailyProfit:
    date: str
    lucro: float

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "lucro": self.lucro}


@dataclass
class Breakdown:
    """Per-dimension totals (operador, casa or esporte).

    ``dimension`` is the JSON key the group value is emitted under.
    """
    dimension: str
    key: str
    entradas: int = 0
    lucro: float = 0.0
    stake_total: float = 0.0

    @property
    def yield_percent(self) -> float:
        return (self.lucro / self.stake_total) * 100 if self.stake_total > 0 else 0

    def add(self, lucro: float, stake: float) -> None:
        self.entradas += 1
        self.lucro += lucro
        self.stake_total += stake

    def to_dict(self) -> dict[str, Any]:
        return {
            self.dimension: self.key,
            "entradas": self.entradas,
            "lucro": self.lucro,
            "stake_total": self.stake_total,
            "yield_percent": self.yield_percent,
        }


@dataclass(frozen=True)
class DashboardStats:
    overview: Overview
    lucro_por_dia: list[DailyProfit] = field(default_factory=list)
    por_operador: list[Breakdown] = field(default_factory=list)
    por_casa: list[Breakdown] = field(default_factory=list)
    por_esporte: list[Breakdown] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overview": self.overview.to_dict(),
            "lucroPorDia": [d.to_dict() for d in self.lucro_por_dia],
            "porOperador": [b.to_dict() for b in self.por_operador],
            "porCasa": [b.to_dict() for b in self.por_casa],
            "porEsporte": [b.to_dict() for b in self.por_esporte],
        }
