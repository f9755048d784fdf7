"""Driver backed by a SQLAlchemy engine.

Lets one facade talk to any database SQLAlchemy can reach (MySQL through
PyMySQL, PostgreSQL through psycopg, SQLite through pysqlite, ...) from a
single database URL.  Statements are sent with
:meth:`sqlalchemy.engine.Connection.exec_driver_sql`, so the text and the
positional parameters go to the DB-API driver untouched; the compiler picked
for :attr:`SQLAlchemyDriver.dialect_name` supplies the matching placeholder.

The connection is opened once, in ``AUTOCOMMIT`` mode, and held until
:meth:`SQLAlchemyDriver.close`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import Engine, String, create_engine
from sqlalchemy.engine import Connection, CursorResult
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError

from chaindb.drivers.base import Driver, StatementHandle, is_prepare_failure
from chaindb.errors import ExecutionError, PrepareError
from chaindb.schema.converters import schema_from_sqlalchemy
from chaindb.schema.snapshot import SchemaSnapshot

logger = logging.getLogger(__name__)

#: Per-dialect query returning the id generated by the last INSERT.
_LAST_INSERT_ID_SQL: dict[str, str] = {
    "sqlite": "SELECT last_insert_rowid()",
    "mysql": "SELECT LAST_INSERT_ID()",
    "mariadb": "SELECT LAST_INSERT_ID()",
    "postgresql": "SELECT lastval()",
}


class SQLAlchemyDriver(Driver):
    """Driver adapter holding one connection from a SQLAlchemy engine.

    Args:
        engine: An :class:`~sqlalchemy.engine.Engine`, or a database URL
            from which one is created.
        **engine_kwargs: Extra ``create_engine`` arguments (URL form only).
    """

    def __init__(self, engine: Engine | str, **engine_kwargs: Any) -> None:
        self._owns_engine = isinstance(engine, str)
        self._engine: Engine = (
            create_engine(engine, **engine_kwargs) if isinstance(engine, str) else engine
        )
        self._conn: Connection | None = self._engine.connect().execution_options(
            isolation_level="AUTOCOMMIT"
        )
        logger.debug("Opened %s connection via SQLAlchemy", self._engine.dialect.name)

    @property
    def dialect_name(self) -> str:
        return self._engine.dialect.name

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def connection(self) -> Connection:
        """The live SQLAlchemy connection."""
        if self._conn is None:
            raise ExecutionError("The SQLAlchemy connection is closed.")
        return self._conn

    @property
    def closed(self) -> bool:
        return self._conn is None

    # ------------------------------------------------------------------
    # Statement lifecycle
    # ------------------------------------------------------------------

    def prepare(self, sql: str) -> StatementHandle:
        # The DB-API driver compiles the text on execute.
        if self._conn is None:
            raise PrepareError("The SQLAlchemy connection is closed.", sql=sql)
        return StatementHandle(sql=sql)

    def execute(self, handle: StatementHandle, params: Sequence[Any]) -> int:
        # No parameters means no paramstyle formatting (keeps literal '%' intact).
        parameters = tuple(params) if params else None
        try:
            result: CursorResult = self.connection.exec_driver_sql(handle.sql, parameters)
        except IntegrityError as exc:
            raise ExecutionError(
                f"Statement failed: {exc.orig}", sql=handle.sql, diagnostic=str(exc.orig)
            ) from exc
        except DBAPIError as exc:
            diagnostic = str(exc.orig) if exc.orig is not None else str(exc)
            if is_prepare_failure(exc):
                raise PrepareError(
                    f"Problem preparing query: {diagnostic}", sql=handle.sql, diagnostic=diagnostic
                ) from exc
            raise ExecutionError(
                f"Statement failed: {diagnostic}", sql=handle.sql, diagnostic=diagnostic
            ) from exc
        except SQLAlchemyError as exc:
            raise ExecutionError(
                f"Statement failed: {exc}", sql=handle.sql, diagnostic=str(exc)
            ) from exc

        handle.cursor = result
        handle.columns = list(result.keys()) if result.returns_rows else []
        handle.rowcount = result.rowcount
        return handle.rowcount

    def fetch_next_row(self, handle: StatementHandle) -> dict[str, Any] | None:
        if not handle.returns_rows:
            return None
        row = handle.cursor.fetchone()
        if row is None:
            return None
        return dict(zip(handle.columns, row))

    def release(self, handle: StatementHandle) -> None:
        if handle.cursor is not None:
            handle.cursor.close()
        handle.cursor = None

    # ------------------------------------------------------------------
    # Connection helpers
    # ------------------------------------------------------------------

    def quote(self, value: str) -> str:
        process = String().literal_processor(dialect=self._engine.dialect)
        return process(str(value))

    def last_insert_id(self) -> Any:
        sql = _LAST_INSERT_ID_SQL.get(self.dialect_name)
        if sql is None:
            raise ExecutionError(
                f"Last insert id is not available for the {self.dialect_name} dialect."
            )
        try:
            return self.connection.exec_driver_sql(sql).scalar()
        except SQLAlchemyError as exc:
            raise ExecutionError(
                f"Could not read last insert id: {exc}", sql=sql, diagnostic=str(exc)
            ) from exc

    def reflect(self, include_tables: list[str] | None = None) -> SchemaSnapshot:
        return schema_from_sqlalchemy(self.connection, include_tables=include_tables)

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        if self._owns_engine:
            self._engine.dispose()
        logger.debug("Closed %s connection via SQLAlchemy", self._engine.dialect.name)
