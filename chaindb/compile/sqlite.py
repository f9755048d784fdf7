"""SQLite dialect compiler."""
from __future__ import annotations

from chaindb.compile.base import SQLCompiler


class SQLiteCompiler(SQLCompiler):
    """Compiles statements to SQLite-flavoured parameterized SQL.

    Parameter style: ``?`` (qmark) – compatible with Python's built-in
    ``sqlite3`` positional execution (``cursor.execute(sql, tuple)``).

    Note: ``DELETE ... LIMIT`` only works when SQLite was built with
    ``SQLITE_ENABLE_UPDATE_DELETE_LIMIT``; otherwise the driver rejects it
    at prepare time.
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    @property
    def placeholder(self) -> str:
        return "?"
