"""Core StatementSpec → SQL compilation logic.

``StatementBuilder`` is the top-level orchestrator.  It appends clause
fragments in a fixed order and lets each clause builder register the bind
values for the placeholders it emits:

1. ``SET`` list (UPDATE only)           - row-data values
2. ``WHERE`` conjunction (not INSERT)   - condition values
3. ``(cols) VALUES(...)`` (INSERT only) - row-data values
4. ``LIMIT``                            - the row limit

Because values are registered as their placeholders are written, the bind
list is row data first, then conditions, then the limit, for every kind.

Sub-builder hierarchy
---------------------
StatementBuilder
  ├── PrefixBuilder        (clause_builders.py)
  ├── SetClauseBuilder     (clause_builders.py)
  ├── WhereClauseBuilder   (clause_builders.py)
  ├── InsertValuesBuilder  (clause_builders.py)
  └── LimitClauseBuilder   (clause_builders.py)
"""

from __future__ import annotations

from chaindb.compile.base import CompiledStatement, SQLCompiler
from chaindb.compile.clause_builders import (
    InsertValuesBuilder,
    LimitClauseBuilder,
    PrefixBuilder,
    SetClauseBuilder,
    WhereClauseBuilder,
)
from chaindb.compile.params import BindParams
from chaindb.schema.statement import StatementKind, StatementSpec


class StatementBuilder:
    """Compiles a validated, policy-approved StatementSpec to parameterized SQL.

    The builder keeps no state between calls; every :meth:`build` works on
    its own statement text and bind list.

    Args:
        compiler: Dialect-specific compiler instance.
    """

    def __init__(self, compiler: SQLCompiler) -> None:
        self._compiler = compiler
        self._prefix = PrefixBuilder()

    @property
    def compiler(self) -> SQLCompiler:
        return self._compiler

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, spec: StatementSpec) -> CompiledStatement:
        """Compile ``spec`` to SQL text plus positional params.

        Args:
            spec: A validated, policy-approved StatementSpec.

        Returns:
            :class:`~chaindb.compile.base.CompiledStatement` whose ``params``
            line up one-to-one with the placeholders in ``sql``.

        Raises:
            CompilationError: If the spec cannot form a valid statement
                (empty row data, LIMIT the dialect does not allow).
        """
        params = BindParams(self._compiler.placeholder)
        parts: list[str] = [self._prefix.build(spec)]

        if spec.kind is StatementKind.UPDATE:
            parts.append(SetClauseBuilder(params).build(spec.data))

        if spec.kind is not StatementKind.INSERT:
            parts.append(WhereClauseBuilder(params).build(spec.conditions))

        if spec.kind is StatementKind.INSERT:
            parts.append(InsertValuesBuilder(params).build(spec.data))

        parts.append(LimitClauseBuilder(self._compiler, params).build(spec))

        return CompiledStatement(
            sql="".join(parts),
            params=params.as_tuple(),
            kind=spec.kind,
            dialect=self._compiler.dialect_name,
        )
