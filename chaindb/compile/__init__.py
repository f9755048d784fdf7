"""chaindb compilation layer: StatementSpec → parameterized SQL."""
from chaindb.compile.base import CompiledStatement, SQLCompiler
from chaindb.compile.builder import StatementBuilder
from chaindb.compile.mysql import MySQLCompiler
from chaindb.compile.postgres import PostgresCompiler
from chaindb.compile.sqlite import SQLiteCompiler

__all__ = [
    "CompiledStatement",
    "SQLCompiler",
    "StatementBuilder",
    "MySQLCompiler",
    "PostgresCompiler",
    "SQLiteCompiler",
]
