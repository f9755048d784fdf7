"""chaindb driver adapters.

``SQLiteDriver`` needs only the standard library.  ``SQLAlchemyDriver``
lives in :mod:`chaindb.drivers.alchemy` and is imported on demand so that
SQLAlchemy stays an optional dependency::

    pip install "chaindb[sqlalchemy]"
"""
from chaindb.drivers.base import Driver, StatementHandle, is_prepare_failure
from chaindb.drivers.sqlite import SQLiteDriver

__all__ = ["Driver", "StatementHandle", "SQLiteDriver", "is_prepare_failure"]
