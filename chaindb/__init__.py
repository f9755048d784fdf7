"""chaindb – a chainable, parameterized SQL facade.

Filter, then act::

    import chaindb

    db = chaindb.connect("shop.db")
    db.where("status", "open").get("orders", limit=10)

Public API
----------
``connect``
    Open a :class:`Database` from a SQLite path, a database URL, or the
    ``CHAINDB_*`` environment settings.

``Database`` / ``Query``
    The facade.  ``Database`` holds the connection; each request builds a
    ``Query`` that accumulates ``where`` conditions and resets them after
    every executing call.

Re-exported types
-----------------
``StatementSpec``, ``SchemaSnapshot``, ``PolicyConfig``,
``CompiledStatement``, ``DatabaseSettings`` and all error classes.

Extensibility
-------------
New dialect compilers can be registered via::

    from chaindb.compile.registry import CompilerFactory

    @CompilerFactory.register("duckdb")
    class DuckDBCompiler(SQLCompiler):
        ...

Any driver whose ``dialect_name`` is ``"duckdb"`` then picks it up.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from chaindb.compile.base import CompiledStatement, SQLCompiler
from chaindb.compile.builder import StatementBuilder
from chaindb.compile.mysql import MySQLCompiler
from chaindb.compile.postgres import PostgresCompiler
from chaindb.compile.registry import CompilerFactory
from chaindb.compile.sqlite import SQLiteCompiler
from chaindb.config import DatabaseSettings, get_settings
from chaindb.database import Database, Query
from chaindb.drivers.base import Driver
from chaindb.drivers.sqlite import SQLiteDriver
from chaindb.errors import (
    ChainDBError,
    CompilationError,
    ConfigurationError,
    DisallowedColumnError,
    DisallowedTableError,
    DriverError,
    ExecutionError,
    InvalidIdentifierError,
    InvalidLimitError,
    PrepareError,
    SchemaError,
    ValidationError,
)
from chaindb.policy.engine import PolicyConfig, PolicyEngine, TablePolicy
from chaindb.schema.converters import schema_from_sqlalchemy
from chaindb.schema.snapshot import ColumnInfo, SchemaSnapshot, TableInfo
from chaindb.schema.statement import StatementKind, StatementSpec
from chaindb.validate.validator import StatementValidator

# ---------------------------------------------------------------------------
# Register built-in compilers with CompilerFactory
# ---------------------------------------------------------------------------

CompilerFactory.register_class("sqlite", SQLiteCompiler)
CompilerFactory.register_class("mysql", MySQLCompiler)
CompilerFactory.register_class("postgres", PostgresCompiler)

__all__ = [
    # Entry points
    "connect",
    "Database",
    "Query",
    # Configuration
    "DatabaseSettings",
    "get_settings",
    # Statement model
    "StatementKind",
    "StatementSpec",
    # Schema
    "SchemaSnapshot",
    "TableInfo",
    "ColumnInfo",
    "schema_from_sqlalchemy",
    "StatementValidator",
    # Policy
    "PolicyConfig",
    "TablePolicy",
    "PolicyEngine",
    # Compilation
    "CompiledStatement",
    "CompilerFactory",
    "SQLCompiler",
    "MySQLCompiler",
    "PostgresCompiler",
    "SQLiteCompiler",
    "StatementBuilder",
    # Drivers
    "Driver",
    "SQLiteDriver",
    # Errors
    "ChainDBError",
    "ConfigurationError",
    "DriverError",
    "PrepareError",
    "ExecutionError",
    "ValidationError",
    "InvalidIdentifierError",
    "InvalidLimitError",
    "SchemaError",
    "DisallowedColumnError",
    "DisallowedTableError",
    "CompilationError",
]


def connect(target: str | Path | None = None, **kwargs: Any) -> Database:
    """Open a :class:`Database`.

    ::

        chaindb.connect()                                   # CHAINDB_* settings
        chaindb.connect("app.db")                           # SQLite file
        chaindb.connect("postgresql+psycopg://u:p@h/db")    # via SQLAlchemy

    Args:
        target: A SQLite path, a database URL (anything containing
            ``"://"``), or ``None`` to use :func:`get_settings`.
        **kwargs: Forwarded to the :class:`Database` constructor
            (``snapshot``, ``policy``, ``compiler``).

    Returns:
        An open :class:`Database`.

    Raises:
        ConfigurationError: If a URL is given but SQLAlchemy is missing, or
            the settings are incomplete.
    """
    if target is None:
        return Database.from_settings(**kwargs)
    if isinstance(target, str) and "://" in target:
        return Database.from_url(target, **kwargs)
    return Database.sqlite(target, **kwargs)
