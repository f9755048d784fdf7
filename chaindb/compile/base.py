"""Compiler abstractions: CompiledStatement and the SQLCompiler ABC.

The Template Method pattern (GoF) is used:
- ``SQLCompiler`` defines the dialect hooks the builder calls while
  assembling each clause.
- ``SQLiteCompiler``, ``MySQLCompiler`` and ``PostgresCompiler`` override
  the dialect-specific steps (placeholder token, LIMIT support on writes).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from chaindb.schema.statement import StatementKind


@dataclass(frozen=True)
class CompiledStatement:
    """The output of a successful compilation.

    Attributes:
        sql: The statement text with positional placeholders.
        params: Values for the placeholders, in placeholder order.
        kind: The statement kind the text was built for.
        dialect: The target dialect (``'sqlite'``, ``'mysql'``, ...).
    """

    sql: str
    params: tuple[Any, ...]
    kind: StatementKind
    dialect: str

    @property
    def placeholder_count(self) -> int:
        return len(self.params)


class SQLCompiler(ABC):
    """Abstract base for dialect-specific SQL compilers.

    Subclasses implement the dialect-specific hooks; the
    ``StatementBuilder`` uses this interface via the Strategy / Template
    Method patterns.
    """

    #: Whether ``UPDATE`` / ``DELETE`` accept a trailing ``LIMIT``.
    supports_write_limit: bool = True

    @property
    @abstractmethod
    def placeholder(self) -> str:
        """Return the positional placeholder token for the driver's paramstyle.

        Returns:
            ``'?'`` for qmark drivers, ``'%s'`` for format drivers.
        """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (``'sqlite'``, ``'mysql'``, ...)."""

    def limit_clause(self) -> str:
        """Return the LIMIT fragment with its (single) placeholder."""
        return f" LIMIT {self.placeholder}"
