"""Statement validation orchestrator.

``StatementValidator`` is the public entry point.  It runs the focused
sub-validators in order and raises the first violation found.

Sub-validator hierarchy
-----------------------
StatementValidator
  ├── IdentifierValidator  (identifier_validator.py) - name syntax
  └── SchemaValidator      (schema_validator.py)     - table / column existence

Row limits are already normalised when the ``StatementSpec`` is created
(see :func:`chaindb.schema.statement.coerce_limit`).
"""
from __future__ import annotations

from chaindb.schema.snapshot import SchemaSnapshot
from chaindb.schema.statement import StatementKind, StatementSpec
from chaindb.validate.identifier_validator import IdentifierValidator
from chaindb.validate.schema_validator import SchemaValidator


class StatementValidator:
    """Validates a StatementSpec before it is compiled.

    Responsibilities delegated to sub-validators (in order):
    1. Identifier checks – table and column names are plain identifiers.
    2. Schema checks     – table and columns exist (only when a snapshot
       is configured).

    Args:
        snapshot: Optional schema snapshot.  Without one, only identifier
            syntax is checked.
    """

    def __init__(self, snapshot: SchemaSnapshot | None = None) -> None:
        self._identifiers = IdentifierValidator()
        self._schema = SchemaValidator(snapshot) if snapshot is not None else None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def validate(self, spec: StatementSpec) -> None:
        """Validate ``spec`` and raise on the first violation found.

        Raises:
            InvalidIdentifierError: If a table or column name is malformed.
            SchemaError: If a snapshot is set and a name is unknown.
        """
        if spec.kind is not StatementKind.QUERY:
            self._identifiers.assert_table(spec.table)
        for column in spec.columns():
            self._identifiers.assert_column(column)

        if self._schema is None:
            return
        if spec.kind is StatementKind.QUERY:
            # Caller-supplied SQL: no single table to check columns against.
            return
        self._schema.assert_table_exists(spec.table)
        for column in spec.columns():
            self._schema.assert_column_exists(spec.table, column)
