# Shared pytest fixtures
from __future__ import annotations

import logging
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient
from gspread.exceptions import GSpreadException, SpreadsheetNotFound

from surebet_dashboard.api.app import create_app
from surebet_dashboard.db.registry import PersistenceError
from surebet_dashboard.logging.init import LOGGER_NAME, reset_logging
from surebet_dashboard.models.config_models import (
    DEFAULT_SHEET_RANGE,
    AppConfig,
    DatabaseConfig,
    GoogleConfig,
    ServerConfig,
)
from surebet_dashboard.models.registered_sheet import RegisteredSheet
from surebet_dashboard.sheets.client import SheetsClient


@pytest.fixture(autouse=True)
def _clean_app_logger():
    """Undo setup_logging between tests so caplog sees module loggers."""
    def _reset() -> None:
        reset_logging()
        app_logger = logging.getLogger(LOGGER_NAME)
        for handler in app_logger.handlers[:]:
            app_logger.removeHandler(handler)
        app_logger.propagate = True
        app_logger.setLevel(logging.NOTSET)

    _reset()
    yield
    _reset()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "credentials").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """server:
  host: 127.0.0.1
  port: 3001
  cors_origins: ["http://localhost:5173"]
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
google:
  credentials_file: ./credentials/service-account.json
  default_range: "NOVEMBRO!A1:Z1000"
  tab_range: "A1:Z1000"
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "dashboard.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def app_config() -> AppConfig:
    return AppConfig(
        server=ServerConfig(host="127.0.0.1", port=3001, cors_origins=["*"]),
        database=DatabaseConfig(dsn="postgresql://test@localhost/test"),
        google=GoogleConfig(credentials_file="unused.json"),
    )


class InMemoryRegistry:
    """Registry double with the SheetRegistry interface."""

    def __init__(self) -> None:
        self._rows: dict[int, RegisteredSheet] = {}
        self._next_id = 1
        self.initialized = False

    def init_schema(self) -> None:
        self.initialized = True

    def insert(self, name: str, google_sheet_id: str, range: str = DEFAULT_SHEET_RANGE) -> RegisteredSheet:
        sheet = RegisteredSheet(
            id=self._next_id,
            name=name,
            google_sheet_id=google_sheet_id,
            range=range,
            created_at=datetime(2025, 11, 1, 12, 0, tzinfo=UTC),
        )
        self._rows[sheet.id] = sheet
        self._next_id += 1
        return sheet

    def list_all(self) -> list[RegisteredSheet]:
        return sorted(self._rows.values(), key=lambda s: s.id, reverse=True)

    @staticmethod
    def _check_id(sheet_id: int) -> None:
        # int4 column: PostgreSQL refuses the comparison outright
        if not -2**31 <= sheet_id <= 2**31 - 1:
            raise PersistenceError(f"value \"{sheet_id}\" is out of range for type integer")

    def get(self, sheet_id: int) -> RegisteredSheet | None:
        self._check_id(sheet_id)
        return self._rows.get(sheet_id)

    def delete(self, sheet_id: int) -> bool:
        self._check_id(sheet_id)
        return self._rows.pop(sheet_id, None) is not None


class FakeWorksheet:
    def __init__(self, title: str) -> None:
        self.title = title


class FakeSpreadsheet:
    """values_get / worksheets over in-memory tabs."""

    def __init__(self, tabs: dict[str, list[list[Any]]], failing: set[str] | None = None) -> None:
        self.tabs = tabs
        self.failing = failing or set()
        self.requested: list[str] = []

    def worksheets(self) -> list[FakeWorksheet]:
        return [FakeWorksheet(title) for title in self.tabs]

    def values_get(self, range_name: str) -> dict[str, Any]:
        self.requested.append(range_name)
        tab = range_name.rsplit("!", 1)[0]
        if tab.startswith("'") and tab.endswith("'"):
            tab = tab[1:-1].replace("''", "'")
        if tab in self.failing:
            raise GSpreadException(f"unable to read {tab}")
        values = self.tabs.get(tab)
        if not values:
            return {"range": range_name}
        return {"range": range_name, "values": values}


class FakeGspreadClient:
    def __init__(self, spreadsheets: dict[str, FakeSpreadsheet]) -> None:
        self.spreadsheets = spreadsheets
        self.opened: list[str] = []

    def open_by_key(self, key: str) -> FakeSpreadsheet:
        self.opened.append(key)
        if key not in self.spreadsheets:
            raise SpreadsheetNotFound(key)
        return self.spreadsheets[key]


@pytest.fixture()
def registry() -> InMemoryRegistry:
    return InMemoryRegistry()


@pytest.fixture()
def november_tab() -> list[list[Any]]:
    return [
        ["Controle de Surebets - Novembro"],
        [],
        ["  Data   Aposta ", "Casa", "Esporte", "Evento", "Stake", "Lucro"],
        ["03/11/2025 22:29:54", "Bet365", "Futebol", "Flamengo x Palmeiras", "R$ 100,00", "R$ 10,00"],
        ["03/11/2025 22:30:10", "Betano", "Futebol", " flamengo x palmeiras ", "R$ 95,00", "-R$ 5,00"],
        ["", "", "", "", "", ""],
        ["04/11/2025", "Pinnacle", "Tênis", "Alcaraz x Sinner", "R$ 1.080,00", "R$ 0,00"],
        ["Total", "", "", "", "R$ 1.275,00", "R$ 5,00"],
    ]


@pytest.fixture()
def gspread_client(november_tab) -> FakeGspreadClient:
    return FakeGspreadClient({"sheet-nov": FakeSpreadsheet({"NOVEMBRO": november_tab})})


@pytest.fixture()
def sheets_client(gspread_client: FakeGspreadClient) -> SheetsClient:
    return SheetsClient(client=gspread_client)


@pytest.fixture()
def api_client(app_config: AppConfig, registry: InMemoryRegistry, sheets_client: SheetsClient):
    app = create_app(app_config, registry=registry, sheets_client=sheets_client)
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def make_sheets_client():
    """Build a SheetsClient over {spreadsheet id: {tab title: values}}."""
    def _make(spreadsheets: dict[str, dict[str, list[list[Any]]]], failing: set[str] | None = None) -> SheetsClient:
        fakes = {key: FakeSpreadsheet(tabs, failing) for key, tabs in spreadsheets.items()}
        return SheetsClient(client=FakeGspreadClient(fakes))
    return _make
