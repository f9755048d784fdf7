"""Driver base interface for chaindb.

This module defines the minimal contract every SQL driver adapter must
satisfy.  The facade and executor only ever talk to a driver through it:

    driver.prepare(sql)               -> StatementHandle
    driver.execute(handle, params)    -> rows affected (-1 when unknown)
    driver.fetch_next_row(handle)     -> dict | None
    driver.release(handle)            -> frees the cursor or result
    driver.quote(value)               -> escaped SQL string literal
    driver.last_insert_id()           -> id of the last inserted row
    driver.close()
    driver.dialect_name               -> key into CompilerFactory

Adapters are expected to translate their native exceptions into
:class:`~chaindb.errors.PrepareError` (the statement text was rejected) or
:class:`~chaindb.errors.ExecutionError` (the statement failed while
running).  :func:`is_prepare_failure` holds the shared heuristic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from chaindb.errors import ConfigurationError
from chaindb.schema.snapshot import SchemaSnapshot

# Fragments of driver messages meaning "this SQL text cannot be compiled".
_PREPARE_MARKERS: tuple[str, ...] = (
    "syntax error",
    "incomplete input",
    "no such table",
    "no such column",
    "has no column named",
    "unrecognized token",
    "error in your sql syntax",
    "doesn't exist",
    "unknown column",
    "does not exist",
    "one statement at a time",
)


def is_prepare_failure(exc: BaseException) -> bool:
    """Return ``True`` if ``exc`` reports malformed or unresolvable SQL."""
    message = str(exc).lower()
    return any(marker in message for marker in _PREPARE_MARKERS)


@dataclass
class StatementHandle:
    """A statement prepared by a driver.

    Attributes:
        sql: The statement text.
        cursor: Driver-specific cursor or result object, set by ``execute``.
        columns: Result column names in driver order (empty for DML).
        rowcount: Rows affected by the last execution (-1 when unknown).
    """

    sql: str
    cursor: Any = None
    columns: list[str] = field(default_factory=list)
    rowcount: int = -1

    @property
    def returns_rows(self) -> bool:
        return bool(self.columns)


class Driver(ABC):
    """Abstract base class for a chaindb driver adapter.

    Concrete subclasses may define any constructor signature they want
    (e.g. ``SQLiteDriver(path)``, ``SQLAlchemyDriver(engine)``).  A driver
    owns exactly one connection for its whole lifetime.
    """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Dialect name used to pick the SQL compiler."""
        raise NotImplementedError

    @abstractmethod
    def prepare(self, sql: str) -> StatementHandle:
        """Prepare ``sql`` for execution.

        Raises:
            PrepareError: If the driver rejects the statement text.
        """
        raise NotImplementedError

    @abstractmethod
    def execute(self, handle: StatementHandle, params: Sequence[Any]) -> int:
        """Run a prepared statement with positional ``params``.

        Returns:
            Number of rows affected, or ``-1`` when the driver cannot tell.

        Raises:
            PrepareError: If the statement text is rejected at this point.
            ExecutionError: For any other driver failure.
        """
        raise NotImplementedError

    @abstractmethod
    def fetch_next_row(self, handle: StatementHandle) -> dict[str, Any] | None:
        """Return the next result row as a dict, or ``None`` when drained."""
        raise NotImplementedError

    def release(self, handle: StatementHandle) -> None:
        """Free driver resources held by ``handle``.

        Called once per handle, after its rows are drained or its row count
        is read, and also when execution fails.
        """

    @abstractmethod
    def quote(self, value: str) -> str:
        """Return ``value`` as a quoted, escaped SQL string literal."""
        raise NotImplementedError

    @abstractmethod
    def last_insert_id(self) -> Any:
        """Return the id generated by the most recent INSERT."""
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        """Release the connection.  Safe to call more than once."""
        raise NotImplementedError

    @property
    def closed(self) -> bool:
        return False

    def reflect(self, include_tables: list[str] | None = None) -> SchemaSnapshot:
        """Describe the connected database's tables and columns.

        Raises:
            ConfigurationError: If this driver cannot reflect its schema.
        """
        raise ConfigurationError(
            f"{type(self).__name__} does not support schema reflection; "
            "use a SQLAlchemy-backed Database instead."
        )
