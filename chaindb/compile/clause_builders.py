"""Clause-level SQL builders.

Each class renders exactly one fragment and registers the values for the
placeholders it emits on the shared :class:`~chaindb.compile.params.BindParams`.
The builder calls them in textual order, so bind order always equals
placeholder order.

Classes
-------
PrefixBuilder        - ``SELECT * FROM t`` / ``INSERT into t`` / ``UPDATE t SET `` / ``DELETE FROM t``
SetClauseBuilder     - ``a = ?, b = ?``
WhereClauseBuilder   - `` WHERE a = ? AND b = ?``
InsertValuesBuilder  - ``(a, b) VALUES(?, ?)``
LimitClauseBuilder   - `` LIMIT ?``
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from chaindb.compile.base import SQLCompiler
from chaindb.compile.params import BindParams
from chaindb.errors import CompilationError
from chaindb.schema.statement import StatementKind, StatementSpec

_PREFIXES: dict[StatementKind, str] = {
    StatementKind.SELECT: "SELECT * FROM {table}",
    StatementKind.INSERT: "INSERT into {table}",
    StatementKind.UPDATE: "UPDATE {table} SET ",
    StatementKind.DELETE: "DELETE FROM {table}",
}


class PrefixBuilder:
    """Builds the leading statement text for a spec."""

    def build(self, spec: StatementSpec) -> str:
        if spec.kind is StatementKind.QUERY:
            return spec.prefix or ""
        return _PREFIXES[spec.kind].format(table=spec.table)


class SetClauseBuilder:
    """Builds the ``col = ?, …`` list of an UPDATE."""

    def __init__(self, params: BindParams) -> None:
        self._params = params

    def build(self, data: Mapping[str, Any]) -> str:
        if not data:
            raise CompilationError("UPDATE needs at least one column to set.", clause="SET")
        return ", ".join(f"{col} = {self._params.add(val)}" for col, val in data.items())


class WhereClauseBuilder:
    """Builds the `` WHERE col = ? AND …`` conjunction."""

    def __init__(self, params: BindParams) -> None:
        self._params = params

    def build(self, conditions: Mapping[str, Any]) -> str:
        if not conditions:
            return ""
        parts = [f"{col} = {self._params.add(val)}" for col, val in conditions.items()]
        return " WHERE " + " AND ".join(parts)


class InsertValuesBuilder:
    """Builds ``(a, b) VALUES(?, ?)`` for an INSERT.

    Values are never inlined; only the placeholder count depends on them.
    """

    def __init__(self, params: BindParams) -> None:
        self._params = params

    def build(self, data: Mapping[str, Any]) -> str:
        if not data:
            raise CompilationError("INSERT needs at least one column.", clause="VALUES")
        columns = ", ".join(data)
        placeholders = ", ".join(self._params.add(val) for val in data.values())
        return f"({columns}) VALUES({placeholders})"


class LimitClauseBuilder:
    """Builds the `` LIMIT ?`` suffix; the limit is always a bound value."""

    def __init__(self, compiler: SQLCompiler, params: BindParams) -> None:
        self._compiler = compiler
        self._params = params

    def build(self, spec: StatementSpec) -> str:
        if spec.limit is None:
            return ""
        if spec.is_write and not self._compiler.supports_write_limit:
            raise CompilationError(
                f"The {self._compiler.dialect_name} dialect does not support "
                f"LIMIT on {spec.kind.value.upper()} statements.",
                clause="LIMIT",
            )
        self._params.add(spec.limit)
        return self._compiler.limit_clause()
