from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2
import psycopg2.extras

from ..models.config_models import DEFAULT_SHEET_RANGE, DatabaseConfig
from ..models.registered_sheet import RegisteredSheet

"""Registry of dashboard spreadsheets (PostgreSQL, psycopg2).

One table, ``sheets``. Every operation opens its own connection and runs in
its own transaction; psycopg2 errors are wrapped in PersistenceError.

The calls are blocking; the API layer runs them in the thread pool.
"""

__all__ = [
    "PersistenceError",
    "SheetRegistry",
    "resolve_dsn",
]

logger = logging.getLogger(__name__)

_COLUMNS = 'id, name, google_sheet_id, "range", created_at'

CREATE_TABLE_SQL = f"""
CREATE TABLE IF NOT EXISTS sheets (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    google_sheet_id TEXT NOT NULL,
    "range" TEXT DEFAULT '{DEFAULT_SHEET_RANGE}',
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""


class PersistenceError(Exception):
    pass


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    """Build the connection string.

    Priority:
        1. DATABASE_URL / PGDSN environment variables (whole DSN)
        2. ``dsn`` from the config file
        3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, each falling
           back to the matching config value
    """
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn

    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


class SheetRegistry:
    """Insert / list / get / delete over the ``sheets`` table."""

    def __init__(self, dsn: str) -> None:
        self.dsn = dsn

    @contextmanager
    def _cursor(self) -> Iterator[Any]:
        conn = None
        try:
            conn = psycopg2.connect(self.dsn)
            # `with conn` commits on success and rolls back on error
            with conn:
                with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                    yield cur
        except psycopg2.Error as e:
            logger.error(f"registry: {e}")
            raise PersistenceError(str(e)) from e
        finally:
            if conn is not None:
                conn.close()

    def init_schema(self) -> None:
        with self._cursor() as cur:
            cur.execute(CREATE_TABLE_SQL)

    def insert(self, name: str, google_sheet_id: str, range: str = DEFAULT_SHEET_RANGE) -> RegisteredSheet:
        with self._cursor() as cur:
            cur.execute(
                f'INSERT INTO sheets (name, google_sheet_id, "range") VALUES (%s, %s, %s) RETURNING {_COLUMNS}',
                (name, google_sheet_id, range),
            )
            row = cur.fetchone()
        if row is None:
            raise PersistenceError("insert returned no row")
        return RegisteredSheet.from_row(row)

    def list_all(self) -> list[RegisteredSheet]:
        """All registrations, newest (highest id) first."""
        with self._cursor() as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM sheets ORDER BY id DESC")
            rows = cur.fetchall()
        return [RegisteredSheet.from_row(r) for r in rows]

    def get(self, sheet_id: int) -> RegisteredSheet | None:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM sheets WHERE id = %s", (sheet_id,))
            row = cur.fetchone()
        return RegisteredSheet.from_row(row) if row is not None else None

    def delete(self, sheet_id: int) -> bool:
        """Delete one registration; False when the id did not exist."""
        with self._cursor() as cur:
            cur.execute("DELETE FROM sheets WHERE id = %s", (sheet_id,))
            deleted = cur.rowcount
        return deleted > 0
