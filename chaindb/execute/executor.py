"""Statement execution against a driver.

``Executor`` owns the prepare → execute → materialize → release sequence.
Each public method runs that sequence as one unit under the executor's
lock, so one ``Database`` can be shared by several threads as long as
every thread builds its own ``Query``.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from chaindb.compile.base import CompiledStatement
from chaindb.drivers.base import Driver, StatementHandle
from chaindb.errors import DriverError, PrepareError
from chaindb.execute.results import materialize

logger = logging.getLogger(__name__)


class Executor:
    """Runs compiled statements through a :class:`~chaindb.drivers.base.Driver`.

    Args:
        driver: The driver adapter holding the connection.
    """

    def __init__(self, driver: Driver) -> None:
        self._driver = driver
        self._lock = threading.RLock()

    @property
    def driver(self) -> Driver:
        return self._driver

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch_all(self, compiled: CompiledStatement) -> list[dict[str, Any]]:
        """Run a row-returning statement and return every row."""
        return self.fetch_raw(compiled.sql, compiled.params)

    def fetch_raw(self, sql: str, params: Sequence[Any] | None = None) -> list[dict[str, Any]]:
        """Run caller-supplied SQL with caller-supplied params."""
        with self._lock, self._statement(sql, params or ()) as handle:
            return materialize(self._driver, handle)

    def execute(self, compiled: CompiledStatement) -> int:
        """Run a data-modifying statement and return rows affected."""
        with self._lock, self._statement(compiled.sql, compiled.params) as handle:
            return handle.rowcount

    def insert(self, compiled: CompiledStatement) -> Any | None:
        """Run an INSERT; return the new row id, or ``None`` if nothing was inserted."""
        with self._lock:
            with self._statement(compiled.sql, compiled.params) as handle:
                rowcount = handle.rowcount
            if rowcount <= 0:
                return None
            return self._driver.last_insert_id()

    def last_insert_id(self) -> Any:
        with self._lock:
            return self._driver.last_insert_id()

    def quote(self, value: str) -> str:
        with self._lock:
            return self._driver.quote(value)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _statement(self, sql: str, params: Sequence[Any]) -> Iterator[StatementHandle]:
        """Prepare and execute ``sql``; release the handle on the way out."""
        logger.debug("Executing %s with %d parameter(s)", sql, len(params))
        try:
            handle = self._driver.prepare(sql)
        except DriverError as exc:
            self._log_failure(sql, exc)
            raise
        try:
            try:
                self._driver.execute(handle, params)
            except DriverError as exc:
                self._log_failure(sql, exc)
                raise
            yield handle
        finally:
            self._driver.release(handle)

    @staticmethod
    def _log_failure(sql: str, exc: DriverError) -> None:
        if isinstance(exc, PrepareError):
            logger.warning("Problem preparing query %r: %s", sql, exc.diagnostic or exc)
        else:
            logger.warning("Statement %r failed: %s", sql, exc.diagnostic or exc)
