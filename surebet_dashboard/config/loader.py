from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_SHEET_RANGE,
    DEFAULT_TAB_RANGE,
    AppConfig,
    DatabaseConfig,
    GoogleConfig,
    ServerConfig,
)

"""Config loader.

Responsibilities:
- Load YAML config/dashboard.yml
- Validate it against config_schema.json (shipped next to this module)
- Apply defaults for optional keys
- Apply environment overrides (PORT, GOOGLE_CREDS_FILE)

Database environment variables (DATABASE_URL, PG*) are resolved later by
``surebet_dashboard.db.registry.resolve_dsn`` so that the YAML values stay a
plain fallback.
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/dashboard.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or if
            the config data fails schema validation.
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _server_config(raw: dict[str, Any]) -> ServerConfig:
    defaults = ServerConfig()
    port = raw.get("port", defaults.port)
    env_port = os.getenv("PORT")
    if env_port:
        try:
            port = int(env_port)
        except ValueError as e:
            raise ConfigError(f"invalid PORT environment value: {env_port!r}") from e
    return ServerConfig(
        host=raw.get("host", defaults.host),
        port=port,
        cors_origins=list(raw.get("cors_origins", defaults.cors_origins)),
    )


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    google_raw = data["google"]
    return AppConfig(
        server=_server_config(data.get("server") or {}),
        database=DatabaseConfig(
            host=db_raw.get("host"),
            port=db_raw.get("port"),
            user=db_raw.get("user"),
            password=db_raw.get("password"),
            database=db_raw.get("database"),
            dsn=db_raw.get("dsn"),
        ),
        google=GoogleConfig(
            credentials_file=os.getenv("GOOGLE_CREDS_FILE") or google_raw["credentials_file"],
            default_range=google_raw.get("default_range", DEFAULT_SHEET_RANGE),
            tab_range=google_raw.get("tab_range", DEFAULT_TAB_RANGE),
        ),
    )
