"""PostgreSQL dialect compiler."""

from __future__ import annotations

from chaindb.compile.base import SQLCompiler


class PostgresCompiler(SQLCompiler):
    """Compiles statements to PostgreSQL-flavoured parameterized SQL.

    Parameter style: ``%s`` (format) – compatible with ``psycopg2`` and
    ``psycopg`` positional execution.

    PostgreSQL has no ``DELETE ... LIMIT``; the builder refuses to emit it
    rather than letting the server reject the statement.
    """

    supports_write_limit = False

    @property
    def dialect_name(self) -> str:
        return "postgres"

    @property
    def placeholder(self) -> str:
        return "%s"
