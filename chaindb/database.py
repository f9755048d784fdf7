"""The chaindb facade: ``Database`` and the per-request ``Query``.

``Database`` owns the connection (through a driver), the compiler, the
validator and the policy engine.  It keeps no per-request state: every call
either runs directly or starts a fresh :class:`Query`, which accumulates
``where`` conditions and is reset after each executing call::

    db = Database.sqlite("shop.db")

    db.where("id", 7).where("status", "open").get("orders")
    # SELECT * FROM orders WHERE id = ? AND status = ?   (7, "open")

    db.insert("orders", {"customer_id": 3, "status": "open"})
    db.where("id", 7).update("orders", {"status": "paid"})
    db.where("id", 7).delete("orders")

A ``Query`` belongs to one caller; share the ``Database``, not the
``Query``, between threads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from chaindb import session
from chaindb.compile.base import CompiledStatement, SQLCompiler
from chaindb.compile.builder import StatementBuilder
from chaindb.compile.registry import CompilerFactory
from chaindb.conditions import ConditionSet
from chaindb.config import DatabaseSettings, get_settings
from chaindb.drivers.base import Driver
from chaindb.drivers.sqlite import SQLiteDriver
from chaindb.errors import ConfigurationError
from chaindb.execute.executor import Executor
from chaindb.policy.engine import PolicyConfig, PolicyEngine
from chaindb.schema.snapshot import SchemaSnapshot
from chaindb.schema.statement import StatementKind, StatementSpec
from chaindb.validate.validator import StatementValidator

logger = logging.getLogger(__name__)

Row = dict[str, Any]


class Database:
    """Connection-backed statement builder and executor.

    Args:
        driver: Driver adapter holding the connection.
        snapshot: Optional schema snapshot; when set, every table and
            column is checked against it before compilation.
        policy: Optional access policy; defaults to allow-everything.
        compiler: Optional compiler override; defaults to the one
            registered for ``driver.dialect_name``.
    """

    def __init__(
        self,
        driver: Driver,
        *,
        snapshot: SchemaSnapshot | None = None,
        policy: PolicyConfig | None = None,
        compiler: SQLCompiler | None = None,
    ) -> None:
        self._driver = driver
        self._executor = Executor(driver)
        self._builder = StatementBuilder(compiler or CompilerFactory.create(driver.dialect_name))
        self._validator = StatementValidator(snapshot)
        self._policy = PolicyEngine(policy)
        session.set_active(self)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def sqlite(cls, database: str | Path = ":memory:", *, timeout: float = 5.0, **kwargs: Any) -> Database:
        """Open a SQLite database with the standard-library driver."""
        return cls._open(SQLiteDriver(database, timeout=timeout), **kwargs)

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        engine_kwargs: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> Database:
        """Open any database SQLAlchemy supports from a database URL.

        Raises:
            ConfigurationError: If SQLAlchemy is not installed.
        """
        try:
            from chaindb.drivers.alchemy import SQLAlchemyDriver
        except ImportError as exc:
            raise ConfigurationError(
                "SQLAlchemy is required for Database.from_url(). "
                'Install it with: pip install "chaindb[sqlalchemy]"'
            ) from exc
        return cls._open(SQLAlchemyDriver(url, **(engine_kwargs or {})), **kwargs)

    @classmethod
    def from_settings(cls, settings: DatabaseSettings | None = None, **kwargs: Any) -> Database:
        """Open the database described by ``settings`` (or the environment).

        Raises:
            ConfigurationError: If the ``sqlalchemy`` driver has no URL.
        """
        settings = settings or get_settings()
        kwargs.setdefault("policy", settings.policy())
        if settings.driver == "sqlalchemy":
            if not settings.url:
                raise ConfigurationError("CHAINDB_URL must be set when CHAINDB_DRIVER=sqlalchemy.")
            return cls.from_url(settings.url, engine_kwargs={"echo": settings.echo}, **kwargs)
        return cls.sqlite(settings.database, timeout=settings.timeout, **kwargs)

    @classmethod
    def get_instance(cls) -> Database | None:
        """Return the most recently opened, still-open Database, if any."""
        return session.get_active()

    @classmethod
    def _open(cls, driver: Driver, **kwargs: Any) -> Database:
        # The driver is already connected; close it if construction fails.
        try:
            return cls(driver, **kwargs)
        except BaseException:
            driver.close()
            raise

    # ------------------------------------------------------------------
    # Request entry points (each starts a fresh Query)
    # ------------------------------------------------------------------

    def new_query(self) -> Query:
        """Start an empty per-request :class:`Query`."""
        return Query(self)

    def where(self, column: str, value: Any) -> Query:
        """Start a :class:`Query` filtered on ``column = value``.

        Every call starts a new ``Query``, so the filter only applies to
        calls chained onto the returned object.  In::

            db.where("id", 1)
            db.delete("orders")

        the ``delete`` runs unfiltered and removes every row.  Chain the
        calls (``db.where("id", 1).delete("orders")``) or keep the
        returned ``Query``.
        """
        return self.new_query().where(column, value)

    def raw_query(self, sql: str, params: Sequence[Any] | None = None) -> list[Row]:
        return self.new_query().raw_query(sql, params)

    def query(self, sql: str, limit: Any = None) -> list[Row]:
        return self.new_query().query(sql, limit)

    def get(self, table: str, limit: Any = None) -> list[Row]:
        return self.new_query().get(table, limit)

    def insert(self, table: str, data: Mapping[str, Any]) -> Any | None:
        return self.new_query().insert(table, data)

    def update(self, table: str, data: Mapping[str, Any]) -> bool:
        return self.new_query().update(table, data)

    def delete(self, table: str, limit: Any = None) -> bool:
        return self.new_query().delete(table, limit)

    # ------------------------------------------------------------------
    # Connection helpers
    # ------------------------------------------------------------------

    def escape(self, value: str) -> str:
        """Quote ``value`` as a SQL string literal using the driver's rules."""
        return self._executor.quote(value)

    def get_insert_id(self) -> Any:
        """Return the id generated by the most recent INSERT."""
        return self._executor.last_insert_id()

    def reflect(self, include_tables: list[str] | None = None, *, enforce: bool = False) -> SchemaSnapshot:
        """Describe the connected database's tables and columns.

        Args:
            include_tables: Optional subset of tables to reflect.
            enforce: When ``True``, validate all later statements against
                the reflected snapshot.

        Raises:
            ConfigurationError: If the driver cannot reflect.
        """
        snapshot = self._driver.reflect(include_tables)
        if enforce:
            self._validator = StatementValidator(snapshot)
        return snapshot

    @property
    def driver(self) -> Driver:
        return self._driver

    @property
    def dialect(self) -> str:
        return self._builder.compiler.dialect_name

    @property
    def closed(self) -> bool:
        return self._driver.closed

    def close(self) -> None:
        """Release the connection.  Safe to call more than once."""
        self._driver.close()
        session.clear_active(self)

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Compilation pipeline
    # ------------------------------------------------------------------

    def compile(self, spec: StatementSpec) -> CompiledStatement:
        """Validate, apply policy and compile ``spec``.

        Raises:
            ValidationError: (or subclass) on identifier, schema or policy
                violations.
            CompilationError: If the statement cannot be assembled.
        """
        self._validator.validate(spec)
        spec = self._policy.apply(spec)
        return self._builder.build(spec)

    @property
    def executor(self) -> Executor:
        return self._executor


class Query:
    """One request's accumulated conditions plus the call that runs them.

    Every executing method resets the accumulated conditions before it
    returns or raises, so a ``Query`` can be reused without leaking filters
    from one request into the next.

    Conditions live on the ``Query``, never on the ``Database``: a
    ``Query`` dropped before any executing call takes its filters with it.
    That is logged at DEBUG level on ``chaindb.database``.

    Args:
        db: The owning :class:`Database`.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._conditions = ConditionSet()

    def __del__(self) -> None:
        conditions = getattr(self, "_conditions", None)
        if conditions:
            logger.debug(
                "Discarding %d unexecuted condition(s): %s", len(conditions), conditions.as_dict()
            )

    def where(self, column: str, value: Any) -> Query:
        """Add (or overwrite) the equality filter ``column = value``.

        Example::

            db.where("id", 7).where("title", "MyTitle").get("posts")
        """
        self._conditions.add(column, value)
        return self

    @property
    def conditions(self) -> dict[str, Any]:
        """A copy of the conditions accumulated so far."""
        return self._conditions.as_dict()

    # ------------------------------------------------------------------
    # Executing calls
    # ------------------------------------------------------------------

    def raw_query(self, sql: str, params: Sequence[Any] | None = None) -> list[Row]:
        """Run caller-supplied SQL with caller-supplied positional params.

        Accumulated conditions are not applied (they are still reset).
        """
        try:
            return self._db.executor.fetch_raw(sql, params)
        finally:
            self._reset()

    def query(self, sql: str, limit: Any = None) -> list[Row]:
        """Run caller-supplied SQL with the accumulated conditions appended."""
        try:
            spec = self._spec(StatementKind.QUERY, prefix=sql, limit=limit)
            return self._db.executor.fetch_all(self._db.compile(spec))
        finally:
            self._reset()

    def get(self, table: str, limit: Any = None) -> list[Row]:
        """``SELECT *`` from ``table`` filtered by the accumulated conditions."""
        try:
            spec = self._spec(StatementKind.SELECT, table=table, limit=limit)
            return self._db.executor.fetch_all(self._db.compile(spec))
        finally:
            self._reset()

    def insert(self, table: str, data: Mapping[str, Any]) -> Any | None:
        """Insert one row; return its id, or ``None`` if nothing was inserted.

        Accumulated conditions never apply to an INSERT.
        """
        try:
            if self._conditions:
                logger.warning(
                    "Ignoring %d condition(s) on INSERT into %s", len(self._conditions), table
                )
            spec = StatementSpec.create(StatementKind.INSERT, table=table, data=data)
            return self._db.executor.insert(self._db.compile(spec))
        finally:
            self._reset()

    def update(self, table: str, data: Mapping[str, Any]) -> bool:
        """Update matching rows; ``True`` if at least one row changed."""
        try:
            spec = self._spec(StatementKind.UPDATE, table=table, data=data)
            return self._db.executor.execute(self._db.compile(spec)) > 0
        finally:
            self._reset()

    def delete(self, table: str, limit: Any = None) -> bool:
        """Delete matching rows; ``True`` if at least one row was removed."""
        try:
            spec = self._spec(StatementKind.DELETE, table=table, limit=limit)
            return self._db.executor.execute(self._db.compile(spec)) > 0
        finally:
            self._reset()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _spec(self, kind: StatementKind, **fields: Any) -> StatementSpec:
        return StatementSpec.create(kind, conditions=self._conditions.as_dict(), **fields)

    def _reset(self) -> None:
        self._conditions.clear()
