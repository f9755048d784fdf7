"""Test fixtures: sample schema DDL, SchemaSnapshot JSON and a fake driver."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Literal

from chaindb.drivers.base import Driver, StatementHandle
from chaindb.errors import ExecutionError
from chaindb.schema.snapshot import SchemaSnapshot

_FIXTURES_DIR = Path(__file__).parent


def load_schema_snapshot() -> SchemaSnapshot:
    """Load the sample shop SchemaSnapshot from schema.json."""
    data = json.loads((_FIXTURES_DIR / "schema.json").read_text())
    return SchemaSnapshot.model_validate(data)


def load_ddl(target: Literal["sqlite"] = "sqlite") -> str:
    """Return the sample DDL SQL string for the given backend.

    Args:
        target: Only ``'sqlite'`` ships with the test suite.

    Returns:
        DDL string ready to execute against the target backend.
    """
    filename = f"ddl_{target}.sql"
    return (_FIXTURES_DIR / filename).read_text()


class RecordingDriver(Driver):
    """In-memory driver that records every statement it is asked to run.

    Args:
        dialect: Dialect name reported to the compiler registry.
        rows: Rows returned for statements starting with ``SELECT``.
        rowcount: Rows-affected value reported for every other statement.
        insert_id: Value returned by :meth:`last_insert_id`.
        fail_with: Exception raised from :meth:`execute`, if any.
    """

    def __init__(
        self,
        dialect: str = "sqlite",
        rows: list[dict[str, Any]] | None = None,
        rowcount: int = 1,
        insert_id: Any = 1,
        fail_with: Exception | None = None,
    ) -> None:
        self.dialect = dialect
        self.rows = list(rows or [])
        self.rowcount = rowcount
        self.insert_id = insert_id
        self.fail_with = fail_with
        self.statements: list[tuple[str, tuple[Any, ...]]] = []
        self.released: list[StatementHandle] = []
        self._closed = False

    @property
    def dialect_name(self) -> str:
        return self.dialect

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def last_statement(self) -> tuple[str, tuple[Any, ...]]:
        return self.statements[-1]

    def prepare(self, sql: str) -> StatementHandle:
        if self._closed:
            raise ExecutionError("The recording connection is closed.", sql=sql)
        return StatementHandle(sql=sql)

    def execute(self, handle: StatementHandle, params: Sequence[Any]) -> int:
        self.statements.append((handle.sql, tuple(params)))
        if self.fail_with is not None:
            raise self.fail_with
        if handle.sql.lstrip().upper().startswith("SELECT"):
            handle.columns = list(self.rows[0]) if self.rows else []
            handle.cursor = iter(self.rows)
            handle.rowcount = -1
        else:
            handle.rowcount = self.rowcount
        return handle.rowcount

    def fetch_next_row(self, handle: StatementHandle) -> dict[str, Any] | None:
        row = next(handle.cursor, None)
        return dict(row) if row is not None else None

    def release(self, handle: StatementHandle) -> None:
        self.released.append(handle)

    def quote(self, value: str) -> str:
        return "'" + str(value).replace("'", "''") + "'"

    def last_insert_id(self) -> Any:
        return self.insert_id

    def close(self) -> None:
        self._closed = True
