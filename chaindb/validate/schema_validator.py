"""Schema existence validator.

Checks that the table and every column referenced by a statement actually
exist in the ``SchemaSnapshot``.
"""

from __future__ import annotations

from chaindb.errors import SchemaError
from chaindb.schema.snapshot import SchemaSnapshot


class SchemaValidator:
    """Validates table and column existence against the schema snapshot.

    Args:
        snapshot: The tables and columns statements may reference.
    """

    def __init__(self, snapshot: SchemaSnapshot) -> None:
        self._snapshot = snapshot

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def assert_table_exists(self, table_name: str) -> None:
        """Raise :class:`~chaindb.errors.SchemaError` if table not found."""
        if self._snapshot.get_table(table_name) is None:
            raise SchemaError(
                f"Table '{table_name}' does not exist in the schema snapshot.",
                details={
                    "table": table_name,
                    "allowed_tables": self._snapshot.table_names,
                },
            )

    def assert_column_exists(self, table_name: str, column: str) -> None:
        """Raise :class:`~chaindb.errors.SchemaError` if column not found.

        A qualified ``table.column`` name is looked up on its own table.
        """
        if "." in column:
            table_name, column = column.split(".", 1)
            self.assert_table_exists(table_name)
        if self._snapshot.get_column(table_name, column) is None:
            raise SchemaError(
                f"Column '{column}' does not exist on table '{table_name}'.",
                details={
                    "table": table_name,
                    "column": column,
                    "allowed_columns": self._snapshot.get_column_names(table_name),
                },
            )
