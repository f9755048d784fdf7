"""SQLite driver built on the standard library ``sqlite3`` module.

Used for:
    - local development
    - tests
    - small embedded databases

The connection runs in autocommit mode (``isolation_level=None``): every
statement commits on its own, matching the facade's one-call-one-statement
model.  ``check_same_thread`` is disabled because the owning ``Database``
serialises all access through its lock.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from chaindb.drivers.base import Driver, StatementHandle, is_prepare_failure
from chaindb.errors import ExecutionError, PrepareError

logger = logging.getLogger(__name__)


class SQLiteDriver(Driver):
    """Driver adapter for a single ``sqlite3`` connection.

    Args:
        database: Path to the database file, or ``":memory:"``.
        timeout: Seconds to wait on a locked database.
    """

    def __init__(self, database: str | Path = ":memory:", timeout: float = 5.0) -> None:
        self._database = str(database)
        self._conn: sqlite3.Connection | None = sqlite3.connect(
            self._database,
            timeout=timeout,
            isolation_level=None,
            check_same_thread=False,
        )
        logger.debug("Opened SQLite database %s", self._database)

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    @property
    def connection(self) -> sqlite3.Connection:
        """The live ``sqlite3`` connection."""
        if self._conn is None:
            raise ExecutionError("The SQLite connection is closed.")
        return self._conn

    @property
    def closed(self) -> bool:
        return self._conn is None

    # ------------------------------------------------------------------
    # Statement lifecycle
    # ------------------------------------------------------------------

    def prepare(self, sql: str) -> StatementHandle:
        # sqlite3 compiles the text on execute; a fresh cursor is the handle.
        return StatementHandle(sql=sql, cursor=self.connection.cursor())

    def execute(self, handle: StatementHandle, params: Sequence[Any]) -> int:
        cursor: sqlite3.Cursor = handle.cursor
        try:
            cursor.execute(handle.sql, tuple(params))
        except sqlite3.IntegrityError as exc:
            raise ExecutionError(
                f"Statement failed: {exc}", sql=handle.sql, diagnostic=str(exc)
            ) from exc
        except sqlite3.Error as exc:
            if is_prepare_failure(exc):
                raise PrepareError(
                    f"Problem preparing query: {exc}", sql=handle.sql, diagnostic=str(exc)
                ) from exc
            raise ExecutionError(
                f"Statement failed: {exc}", sql=handle.sql, diagnostic=str(exc)
            ) from exc
        except OverflowError as exc:
            # Python ints wider than 64 bits cannot be bound.
            raise ExecutionError(
                f"Statement failed: {exc}", sql=handle.sql, diagnostic=str(exc)
            ) from exc

        handle.columns = [d[0] for d in cursor.description] if cursor.description else []
        handle.rowcount = cursor.rowcount
        return handle.rowcount

    def fetch_next_row(self, handle: StatementHandle) -> dict[str, Any] | None:
        row = handle.cursor.fetchone()
        if row is None:
            return None
        return dict(zip(handle.columns, row))

    def release(self, handle: StatementHandle) -> None:
        if handle.cursor is not None and self._conn is not None:
            handle.cursor.close()
        handle.cursor = None

    # ------------------------------------------------------------------
    # Connection helpers
    # ------------------------------------------------------------------

    def quote(self, value: str) -> str:
        escaped = str(value).replace("'", "''")
        return f"'{escaped}'"

    def last_insert_id(self) -> int:
        row = self.connection.execute("SELECT last_insert_rowid()").fetchone()
        return row[0]

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.debug("Closed SQLite database %s", self._database)
