from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..models.dashboard_stats import Breakdown, DailyProfit, DashboardStats, Overview
from ..models.records import Entry, NormalizedRecord

"""Statistics engine for the dashboard.

Two populations are aggregated:
- records: individual wager lines (profit/stake totals, per day, per casa,
  per esporte)
- entries: records grouped into surebets (bet count, green/red ratio,
  per operador)
"""

__all__ = [
    "RESOLVED_EPSILON",
    "group_entries",
    "build_stats",
]

# entries whose profit is within this of zero are neither green nor red
RESOLVED_EPSILON = 1e-6


def group_entries(records: Iterable[NormalizedRecord]) -> list[Entry]:
    """Group records by ``data_aposta|evento (lowercase, trimmed)|operador``.

    Exact string equality; entries come out in first-seen order.
    """
    groups: dict[str, Entry] = {}
    for record in records:
        key = record.entry_key
        entry = groups.get(key)
        if entry is None:
            entry = Entry(
                data_aposta=record.data_aposta,
                operador=record.operador,
                evento=record.evento,
                esporte=record.esporte,
            )
            groups[key] = entry
        entry.lucro_total += record.lucro
        entry.stake_total += record.stake
    return list(groups.values())


def _percent(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0


def _overview(records: Sequence[NormalizedRecord], entries: Sequence[Entry]) -> Overview:
    total_stake = sum((r.stake for r in records), 0.0)
    total_lucro = sum((r.lucro for r in records), 0.0)
    greens = sum(1 for e in entries if e.lucro_total > RESOLVED_EPSILON)
    reds = sum(1 for e in entries if e.lucro_total < -RESOLVED_EPSILON)
    resolved = greens + reds
    return Overview(
        total_lucro=total_lucro,
        total_stake=total_stake,
        total_apostas=len(entries),
        yield_percent=(total_lucro / total_stake) * 100 if total_stake > 0 else 0,
        green_percent=_percent(greens, resolved),
        red_percent=_percent(reds, resolved),
    )


def _daily_profit(records: Iterable[NormalizedRecord]) -> list[DailyProfit]:
    per_day: dict[str, float] = {}
    for r in records:
        if not r.data_aposta:
            continue
        per_day[r.data_aposta] = per_day.get(r.data_aposta, 0.0) + r.lucro
    return [DailyProfit(date=d, lucro=per_day[d]) for d in sorted(per_day)]


def _breakdown(dimension: str, items: Iterable[tuple[str, float, float]]) -> list[Breakdown]:
    """Accumulate (key, lucro, stake) triples; empty keys are left out."""
    groups: dict[str, Breakdown] = {}
    for key, lucro, stake in items:
        if not key:
            continue
        group = groups.get(key)
        if group is None:
            group = groups[key] = Breakdown(dimension=dimension, key=key)
        group.add(lucro, stake)
    return list(groups.values())


def build_stats(records: Sequence[NormalizedRecord], entries: Sequence[Entry]) -> DashboardStats:
    """Compute overview and breakdowns from filtered records and their entries."""
    return DashboardStats(
        overview=_overview(records, entries),
        lucro_por_dia=_daily_profit(records),
        por_operador=_breakdown(
            "operador", ((e.operador, e.lucro_total, e.stake_total) for e in entries)
        ),
        por_casa=_breakdown("casa", ((r.casa, r.lucro, r.stake) for r in records)),
        por_esporte=_breakdown("esporte", ((r.esporte, r.lucro, r.stake) for r in records)),
    )
