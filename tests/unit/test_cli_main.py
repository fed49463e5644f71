from __future__ import annotations

import json
from pathlib import Path

import surebet_dashboard.cli.__main__ as cli_mod
from surebet_dashboard.cli.__main__ import main as cli_main
from surebet_dashboard.db.registry import PersistenceError
from surebet_dashboard.models.registered_sheet import RegisteredSheet


def test_cli_missing_config_exits_fatal(temp_workdir: Path, capsys):
    code = cli_main(["inspect", "--sheet-id", "x"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR config: config file not found" in out


def test_cli_inspect_prints_columns(write_config, monkeypatch, make_sheets_client, november_tab, capsys):
    client = make_sheets_client({"sheet-nov": {"NOVEMBRO": november_tab}})
    monkeypatch.setattr(cli_mod, "SheetsClient", lambda **kwargs: client)

    code = cli_main(["inspect", "--sheet-id", "sheet-nov", "--rows", "1"])
    out = capsys.readouterr().out
    assert code == 0
    assert "SHEET: sheet-nov rows=4" in out
    assert "'DATA APOSTA', 'CASA', 'ESPORTE', 'EVENTO', 'STAKE', 'LUCRO'" in out
    assert "Flamengo x Palmeiras" in out
    assert "Pinnacle" not in out


def test_cli_inspect_unknown_sheet(write_config, monkeypatch, make_sheets_client, capsys):
    client = make_sheets_client({})
    monkeypatch.setattr(cli_mod, "SheetsClient", lambda **kwargs: client)

    code = cli_main(["inspect", "--sheet-id", "missing"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR inspect:" in out


class _Registry:
    def __init__(self, sheets, error=None):
        self.sheets = sheets
        self.error = error

    def list_all(self):
        if self.error is not None:
            raise self.error
        return self.sheets


def test_cli_report_prints_stats_json(write_config, monkeypatch, make_sheets_client, november_tab, capsys):
    sheets = [RegisteredSheet(id=1, name="Joao", google_sheet_id="sheet-nov", range="NOVEMBRO!A1:Z1000")]
    monkeypatch.setattr(cli_mod, "SheetRegistry", lambda dsn: _Registry(sheets))
    client = make_sheets_client({"sheet-nov": {"NOVEMBRO": november_tab}})
    monkeypatch.setattr(cli_mod, "SheetsClient", lambda **kwargs: client)

    code = cli_main(["report"])
    out = capsys.readouterr().out
    assert code == 0
    payload = json.loads(out[out.index("{"):out.rindex("}") + 1])
    assert payload["overview"]["totalApostas"] == 2
    assert payload["overview"]["totalStake"] == 1275
    assert payload["porOperador"][0]["operador"] == "Joao"


def test_cli_report_without_sheets(write_config, monkeypatch, capsys):
    monkeypatch.setattr(cli_mod, "SheetRegistry", lambda dsn: _Registry([]))
    code = cli_main(["report"])
    assert code == 1
    assert "ERROR report: no sheets registered" in capsys.readouterr().out


def test_cli_report_database_error(write_config, monkeypatch, capsys):
    monkeypatch.setattr(cli_mod, "SheetRegistry", lambda dsn: _Registry([], PersistenceError("refused")))
    code = cli_main(["report"])
    assert code == 1
    assert "ERROR report: refused" in capsys.readouterr().out


def test_cli_debug_flag_enables_debug_logging(write_config, monkeypatch, capsys):
    monkeypatch.setattr(cli_mod, "SheetRegistry", lambda dsn: _Registry([]))
    cli_main(["--debug", "report"])
    assert "DEBUG debug mode enabled" in capsys.readouterr().out
