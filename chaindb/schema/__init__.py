"""chaindb schema models: StatementSpec and SchemaSnapshot."""
from chaindb.schema.snapshot import ColumnInfo, SchemaSnapshot, TableInfo
from chaindb.schema.statement import StatementKind, StatementSpec, coerce_limit

__all__ = [
    "StatementKind",
    "StatementSpec",
    "coerce_limit",
    "ColumnInfo",
    "SchemaSnapshot",
    "TableInfo",
]
