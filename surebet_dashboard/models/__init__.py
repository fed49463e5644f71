"""Domain models for the surebet dashboard API.

Configuration, sheet registrations, parsed records/entries, statistics and
structured error records.
"""

from .config_models import AppConfig, DatabaseConfig, GoogleConfig, ServerConfig
from .dashboard_stats import Breakdown, DailyProfit, DashboardStats, Overview
from .error_record import ErrorRecord
from .records import Entry, NormalizedRecord
from .registered_sheet import RegisteredSheet

__all__ = [
    # Configuration models
    "AppConfig",
    "DatabaseConfig",
    "GoogleConfig",
    "ServerConfig",
    # Registry
    "RegisteredSheet",
    # Aggregation models
    "NormalizedRecord",
    "Entry",
    "Overview",
    "DailyProfit",
    "Breakdown",
    "DashboardStats",
    # Logging
    "ErrorRecord",
]
