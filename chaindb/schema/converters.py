"""Utilities for building a SchemaSnapshot from a live database.

SQLAlchemy converter
--------------------
:func:`schema_from_sqlalchemy` reflects a database engine and returns a
:class:`~chaindb.schema.snapshot.SchemaSnapshot` that can be handed to the
validator, so every statement is checked against the real table and column
names before it reaches the driver.

Install the optional dependency before using this module::

    pip install "chaindb[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from chaindb.schema.converters import schema_from_sqlalchemy

    engine = create_engine("sqlite:///shop.db")
    snapshot = schema_from_sqlalchemy(engine)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chaindb.schema.snapshot import ColumnInfo, SchemaSnapshot, TableInfo

if TYPE_CHECKING:
    from sqlalchemy import Connection, Engine, MetaData


def schema_from_sqlalchemy(
    bind: Engine | Connection,
    *,
    include_tables: list[str] | None = None,
    schema: str | None = None,
) -> SchemaSnapshot:
    """Build a :class:`SchemaSnapshot` by reflecting a SQLAlchemy engine.

    All tables visible to ``bind`` (or a subset via *include_tables*) are
    reflected using SQLAlchemy's :class:`~sqlalchemy.schema.MetaData` and
    translated into chaindb's schema model.

    Args:
        bind: A :class:`sqlalchemy.engine.Engine` or an open
            :class:`sqlalchemy.engine.Connection`.
        include_tables: Optional allowlist of table names to reflect.
            When ``None`` all tables in the schema are reflected.
        schema: Optional database schema name (e.g. ``"public"`` for
            PostgreSQL).  Passed directly to
            :meth:`sqlalchemy.schema.MetaData.reflect`.

    Returns:
        A fully populated :class:`SchemaSnapshot`.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """
    try:
        from sqlalchemy import Engine as _Engine
        from sqlalchemy import MetaData as _MetaData
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for schema_from_sqlalchemy(). "
            'Install it with: pip install "chaindb[sqlalchemy]"'
        ) from exc

    metadata = _MetaData()
    if isinstance(bind, _Engine):
        with bind.connect() as conn:
            metadata.reflect(bind=conn, only=include_tables, schema=schema)
    else:
        metadata.reflect(bind=bind, only=include_tables, schema=schema)

    return _metadata_to_snapshot(metadata)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _metadata_to_snapshot(metadata: MetaData) -> SchemaSnapshot:
    """Convert a reflected :class:`~sqlalchemy.schema.MetaData` into a
    :class:`SchemaSnapshot`.

    Separated from :func:`schema_from_sqlalchemy` so it can be reused with a
    ``MetaData`` the caller has declared or reflected already.
    """
    tables = [
        TableInfo(
            name=table.name,
            columns=[
                ColumnInfo(
                    name=col.name,
                    type=str(col.type),
                    # Reflected columns report True/False; treat None as nullable.
                    nullable=col.nullable is not False,
                )
                for col in table.columns
            ],
        )
        for table in metadata.sorted_tables
    ]
    return SchemaSnapshot(tables=tables)
