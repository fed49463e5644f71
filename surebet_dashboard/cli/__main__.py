from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from surebet_dashboard.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from surebet_dashboard.db.registry import PersistenceError, SheetRegistry, resolve_dsn
from surebet_dashboard.logging.init import setup_logging
from surebet_dashboard.models.config_models import AppConfig
from surebet_dashboard.services.cache import SheetRowsCache
from surebet_dashboard.services.dashboard import overview_for_all
from surebet_dashboard.services.progress import ProgressTracker
from surebet_dashboard.sheets.client import SheetsClient, UpstreamFetchError

"""CLI entrypoint.

Commands:
- serve (default): run the HTTP API with uvicorn
- inspect: read one spreadsheet and print its canonical columns and first rows
- report: compute the all-sheets statistics once and print them as JSON
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

logger = logging.getLogger("surebet_dashboard.cli")


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env; its values win over variables already in the environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Surebet dashboard API")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    sub = p.add_subparsers(dest="command")

    sub.add_parser("serve", help="Run the HTTP API")

    inspect = sub.add_parser("inspect", help="Print canonical columns and sample rows of a spreadsheet")
    inspect.add_argument("--sheet-id", required=True, help="Google spreadsheet id")
    inspect.add_argument("--range", default=None, help="TAB!A1:Z1000 or A1:Z1000 for every tab")
    inspect.add_argument("--rows", type=int, default=3, help="Number of sample rows")

    report = sub.add_parser("report", help="Print statistics over all registered sheets")
    report.add_argument("--from", dest="date_from", default=None, help="YYYY-MM-DD (inclusive)")
    report.add_argument("--to", dest="date_to", default=None, help="YYYY-MM-DD (inclusive)")
    report.add_argument("--operador", default=None, help="Only sheets with this display name")

    args = p.parse_args(argv)
    if args.command is None:
        args.command = "serve"
    return args


def _serve(cfg: AppConfig, debug: bool) -> int:  # pragma: no cover (blocks until shutdown)
    import uvicorn

    from surebet_dashboard.api.app import create_app

    logger.info(f"API listening on http://{cfg.server.host}:{cfg.server.port}")
    uvicorn.run(
        create_app(cfg),
        host=cfg.server.host,
        port=cfg.server.port,
        log_level="debug" if debug else "info",
    )
    return EXIT_SUCCESS


def _inspect(cfg: AppConfig, sheet_id: str, range_descriptor: str | None, sample: int) -> int:
    client = SheetsClient(credentials_file=cfg.google.credentials_file, tab_range=cfg.google.tab_range)
    try:
        rows = client.fetch_rows(sheet_id, range_descriptor or cfg.google.default_range)
    except UpstreamFetchError as e:
        logger.error(f"inspect: {e}")
        return EXIT_FATAL

    columns: list[str] = []
    for row in rows:
        for col in row:
            if col not in columns:
                columns.append(col)
    print(f"SHEET: {sheet_id} rows={len(rows)} cols={columns}")
    print("  sample_rows=", json.dumps(rows[:sample], ensure_ascii=False, default=str))
    return EXIT_SUCCESS


def _report(cfg: AppConfig, date_from: str | None, date_to: str | None, operador: str | None) -> int:
    registry = SheetRegistry(resolve_dsn(cfg.database))
    client = SheetsClient(credentials_file=cfg.google.credentials_file, tab_range=cfg.google.tab_range)
    try:
        sheets = sorted(registry.list_all(), key=lambda s: s.id)
        if not sheets:
            logger.error("report: no sheets registered")
            return EXIT_FATAL
        with ProgressTracker(len(sheets)) as progress:
            stats = asyncio.run(
                overview_for_all(
                    sheets,
                    SheetRowsCache(),
                    client.afetch_rows,
                    operador=operador,
                    date_from=date_from,
                    date_to=date_to,
                    on_sheet=progress.sheet_done,
                )
            )
    except (PersistenceError, UpstreamFetchError) as e:
        logger.error(f"report: {e}")
        return EXIT_FATAL

    print(json.dumps(stats.to_dict(), ensure_ascii=False, indent=2))
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    # None only: an explicit [] must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "inspect":
        return _inspect(cfg, args.sheet_id, args.range, args.rows)
    if args.command == "report":
        return _report(cfg, args.date_from, args.date_to, args.operador)
    return _serve(cfg, args.debug)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
