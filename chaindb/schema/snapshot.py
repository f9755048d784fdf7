"""Pydantic models describing the tables a Database may touch.

A SchemaSnapshot lists the tables and columns that exist (or that callers
are allowed to reference).  It is optional: without one, the validator only
checks identifier syntax.  Build one by hand, load it from JSON, or reflect
a live database with :func:`chaindb.schema.converters.schema_from_sqlalchemy`.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ColumnInfo(BaseModel):
    """Metadata for a single column.

    Attributes:
        name: Column name.
        type: SQL type string (e.g. ``'TEXT'``, ``'INTEGER'``).
        nullable: Whether the column can be NULL.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    type: str = ""
    nullable: bool = True


class TableInfo(BaseModel):
    """Metadata for a single table.

    Attributes:
        name: Table name.
        columns: Ordered list of column metadata.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    columns: list[ColumnInfo]

    @property
    def column_names(self) -> list[str]:
        """Returns all column names for this table."""
        return [c.name for c in self.columns]


class SchemaSnapshot(BaseModel):
    """Describes the tables and columns statements may reference.

    Attributes:
        tables: All known tables.
    """

    model_config = ConfigDict(extra="forbid")

    tables: list[TableInfo]

    def get_table(self, name: str) -> TableInfo | None:
        """Returns the TableInfo for the given table name, or ``None``."""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def get_column(self, table_name: str, column_name: str) -> ColumnInfo | None:
        """Returns the ColumnInfo for a table.column pair, or ``None``."""
        table = self.get_table(table_name)
        if table is None:
            return None
        for col in table.columns:
            if col.name == column_name:
                return col
        return None

    def get_column_names(self, table_name: str) -> list[str]:
        """Returns column names for ``table_name``, or ``[]`` if not found."""
        table = self.get_table(table_name)
        return table.column_names if table is not None else []

    @property
    def table_names(self) -> list[str]:
        """Returns all table names in the snapshot."""
        return [t.name for t in self.tables]
