"""MySQL dialect compiler."""

from __future__ import annotations

from chaindb.compile.base import SQLCompiler


class MySQLCompiler(SQLCompiler):
    """Compiles statements to MySQL-flavoured parameterized SQL.

    Parameter style: ``%s`` (format) – compatible with ``PyMySQL`` and
    ``mysql-connector-python`` positional execution.

    MySQL accepts ``LIMIT`` on ``UPDATE`` and ``DELETE``.
    """

    @property
    def dialect_name(self) -> str:
        return "mysql"

    @property
    def placeholder(self) -> str:
        return "%s"
