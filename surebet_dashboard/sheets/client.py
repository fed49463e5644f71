from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import gspread
import requests
from gspread.exceptions import GSpreadException, SpreadsheetNotFound
from gspread.utils import absolute_range_name

from ..models.config_models import DEFAULT_SHEET_RANGE, DEFAULT_TAB_RANGE
from ..models.error_record import ErrorRecord
from .extractor import extract_rows

"""Google Sheets reader (gspread, service account).

Range descriptors follow the registration convention:
- ``"NOVEMBRO!A1:Z1000"`` (contains ``!``) reads exactly that tab
- ``"A1:Z1000"`` (no ``!``) is applied to every tab; rows are concatenated in
  tab order and the header found in the first usable tab is reused for the
  following ones

A tab that fails to read is skipped with a WARN line; any other failure is a
single-attempt ``UpstreamFetchError`` for the caller to report.
"""

__all__ = [
    "READ_ONLY_SCOPES",
    "UpstreamFetchError",
    "SheetsClient",
]

logger = logging.getLogger(__name__)

READ_ONLY_SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]

_UPSTREAM_ERRORS = (GSpreadException, requests.RequestException)


class UpstreamFetchError(Exception):
    pass


def _status_code(exc: Exception) -> int | None:
    code = getattr(exc, "code", None)
    if isinstance(code, int):
        return code
    response = getattr(exc, "response", None)
    return getattr(response, "status_code", None)


def _not_found(spreadsheet_id: str, exc: Exception) -> UpstreamFetchError:
    logger.error(
        f"spreadsheet not found: {spreadsheet_id} "
        "(use the id between /d/ and /edit in the URL, not the gid=...)"
    )
    return UpstreamFetchError(f"spreadsheet not found: {spreadsheet_id}: {exc}")


class SheetsClient:
    """Reads registered spreadsheets into header -> value rows.

    The gspread client is created on first use so the service can start (and
    tests can run) without a credentials file; pass ``client`` to inject one.
    """

    def __init__(
        self,
        credentials_file: str | None = None,
        tab_range: str = DEFAULT_TAB_RANGE,
        client: Any = None,
    ) -> None:
        self.credentials_file = credentials_file
        self.tab_range = tab_range
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self.credentials_file:
                raise UpstreamFetchError("no service account credentials file configured")
            path = Path(self.credentials_file)
            if not path.exists():
                raise UpstreamFetchError(f"service account credentials not found: {path}")
            try:
                self._client = gspread.service_account(filename=str(path), scopes=READ_ONLY_SCOPES)
            except (ValueError, KeyError) as e:
                raise UpstreamFetchError(f"invalid service account credentials {path}: {e}") from e
        return self._client

    @staticmethod
    def _read_values(spreadsheet: Any, range_name: str) -> list[list[Any]]:
        response = spreadsheet.values_get(range_name)
        return response.get("values", []) or []

    def _read_all_tabs(self, spreadsheet: Any, spreadsheet_id: str, tab_range: str) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        main_header: list[str] | None = None

        for worksheet in spreadsheet.worksheets():
            title = worksheet.title
            if not title:
                continue
            full_range = absolute_range_name(title, tab_range)
            try:
                values = self._read_values(spreadsheet, full_range)
            except _UPSTREAM_ERRORS as e:
                record = ErrorRecord.create(
                    spreadsheet=spreadsheet_id,
                    tab=title,
                    range=full_range,
                    error_type="TAB_READ_FAILED",
                    message=str(e),
                )
                logger.warning(record.to_json_line())
                continue
            if not values:
                continue

            tab = extract_rows(values, main_header)
            if main_header is None and tab.header:
                main_header = tab.header
            logger.debug(f"tab={title} rows={len(tab.rows)}")
            rows.extend(tab.rows)

        return rows

    def fetch_rows(self, spreadsheet_id: str, range_descriptor: str = DEFAULT_SHEET_RANGE) -> list[dict[str, Any]]:
        """Read one spreadsheet and return its rows keyed by canonical header.

        Raises:
            UpstreamFetchError: credentials missing, spreadsheet not found or
                not shared with the service account, or the read failed.
        """
        client = self.client
        try:
            spreadsheet = client.open_by_key(spreadsheet_id)
            if range_descriptor and "!" in range_descriptor:
                return extract_rows(self._read_values(spreadsheet, range_descriptor)).rows
            return self._read_all_tabs(spreadsheet, spreadsheet_id, range_descriptor or self.tab_range)
        except SpreadsheetNotFound as e:
            raise _not_found(spreadsheet_id, e) from e
        except PermissionError as e:
            raise UpstreamFetchError(
                f"spreadsheet {spreadsheet_id} is not shared with the service account: {e}"
            ) from e
        except _UPSTREAM_ERRORS as e:
            if _status_code(e) == 404:
                raise _not_found(spreadsheet_id, e) from e
            logger.error(f"failed reading spreadsheet {spreadsheet_id}: {e}")
            raise UpstreamFetchError(f"failed reading spreadsheet {spreadsheet_id}: {e}") from e

    async def afetch_rows(self, spreadsheet_id: str, range_descriptor: str = DEFAULT_SHEET_RANGE) -> list[dict[str, Any]]:
        """``fetch_rows`` in a worker thread, keeping the event loop free."""
        return await asyncio.to_thread(self.fetch_rows, spreadsheet_id, range_descriptor)
