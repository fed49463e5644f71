from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the surebet dashboard API.

These are filled by ``surebet_dashboard.config.loader`` after the YAML file
has passed schema validation and environment overrides have been applied.
"""

DEFAULT_SHEET_RANGE = "NOVEMBRO!A1:Z1000"
DEFAULT_TAB_RANGE = "A1:Z1000"


@dataclass(frozen=True)
class ServerConfig:
    """HTTP listener settings. ``PORT`` in the environment wins over ``port``."""
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class DatabaseConfig:
    """PostgreSQL connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class GoogleConfig:
    """Google Sheets access settings."""
    credentials_file: str | None = None  # service account JSON
    default_range: str = DEFAULT_SHEET_RANGE  # range stored when a registration omits one
    tab_range: str = DEFAULT_TAB_RANGE  # applied to every tab when a range has no "!"


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object for the service."""
    server: ServerConfig
    database: DatabaseConfig
    google: GoogleConfig
