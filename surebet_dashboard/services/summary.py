from __future__ import annotations

from ..models.dashboard_stats import DashboardStats

"""SUMMARY line rendering for dashboard computations.

Format:
SUMMARY scope={scope} sheets={sheets} records={records} entries={entries}
lucro={lucro} stake={stake} yield_pct={yield} elapsed_sec={elapsed}
"""


def _format_number(value: float) -> str:
    """Integers without decimals, tiny values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if abs(value) < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.2f}"


def render_summary_line(
    scope: str,
    sheets: int,
    records: int,
    stats: DashboardStats,
    elapsed_seconds: float,
) -> str:
    """Render the SUMMARY line for one overview computation.

    Examples:
        >>> from surebet_dashboard.models.dashboard_stats import DashboardStats, Overview
        >>> stats = DashboardStats(overview=Overview(
        ...     total_lucro=80.5, total_stake=60.0, total_apostas=2,
        ...     yield_percent=134.1666, green_percent=50.0, red_percent=50.0))
        >>> render_summary_line("sheet:1", 1, 2, stats, 0.25)
        'SUMMARY scope=sheet:1 sheets=1 records=2 entries=2 lucro=80.50 stake=60 yield_pct=134.17 elapsed_sec=0.25'
    """
    overview = stats.overview
    return (
        f"SUMMARY scope={scope} "
        f"sheets={sheets} "
        f"records={records} "
        f"entries={overview.total_apostas} "
        f"lucro={_format_number(overview.total_lucro)} "
        f"stake={_format_number(overview.total_stake)} "
        f"yield_pct={_format_number(overview.yield_percent)} "
        f"elapsed_sec={_format_number(elapsed_seconds)}"
    )
