"""Policy and authorization layer.

``PolicyEngine`` runs after identifier / schema validation.  It enforces:

* **Table access control** – an optional table allowlist, plus a set of
  read-only tables that may be queried but never written.
* **Column access control** – per-table positive column allowlists
  (``allowed_columns``) and/or negative blocklists (``denied_columns``),
  plus a global denied column list via :attr:`PolicyConfig.denied_columns`.
  Both row-data keys and condition keys are checked.
* **LIMIT enforcement** – clamps LIMIT values that exceed ``max_limit`` and
  injects ``default_limit`` into table SELECTs that have none.

The default ``PolicyConfig()`` allows everything and changes nothing.

Example: a reporting role that may read two tables and never write::

    reporting = PolicyConfig(
        allowed_tables=["orders", "customers"],
        read_only_tables=["orders", "customers"],
        denied_columns=["password_hash"],
        max_limit=500,
    )
    db = Database(driver, policy=reporting)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from chaindb.errors import DisallowedColumnError, DisallowedTableError
from chaindb.schema.statement import StatementKind, StatementSpec

#: Only table reads receive ``default_limit``; caller SQL may carry its own LIMIT.
_DEFAULT_LIMIT_KINDS = frozenset({StatementKind.SELECT})


@dataclass
class TablePolicy:
    """Per-table runtime policy rules.

    Attributes:
        allowed_columns: Positive allowlist of column names that may appear
            in any statement against this table.  When non-empty, **only**
            the listed columns are permitted.  An empty list (the default)
            means all columns are allowed (subject to ``denied_columns``).
        denied_columns: Column names that are forbidden in any statement
            against this table.  Applied on top of ``allowed_columns``.
    """

    allowed_columns: list[str] = field(default_factory=list)
    denied_columns: list[str] = field(default_factory=list)


@dataclass
class PolicyConfig:
    """Runtime policy configuration applied to every statement.

    Attributes:
        tables: Per-table policies.
        allowed_tables: If non-empty, only these table names may appear in a
            statement.  Empty means every table is allowed.
        read_only_tables: Tables that reject INSERT, UPDATE and DELETE.
        denied_columns: Column names denied globally (across all tables).
        max_limit: Upper bound applied to any LIMIT (``None`` = unbounded).
        default_limit: LIMIT injected into table SELECTs that have
            none (``0`` = no injection).
    """

    tables: dict[str, TablePolicy] = field(default_factory=dict)
    allowed_tables: list[str] = field(default_factory=list)
    read_only_tables: list[str] = field(default_factory=list)
    denied_columns: list[str] = field(default_factory=list)
    max_limit: int | None = None
    default_limit: int = 0

    def denied_columns_for(self, table_name: str | None) -> list[str]:
        """Return the combined denied column list for a specific table.

        Merges the global :attr:`denied_columns` with any per-table denied
        columns configured in :attr:`tables`.

        Args:
            table_name: The table to look up (``None`` for caller SQL).

        Returns:
            De-duplicated list of denied column names.
        """
        tpol = self.tables.get(table_name) if table_name else None
        table_denied = tpol.denied_columns if tpol is not None else []
        return list(set(self.denied_columns) | set(table_denied))


class PolicyEngine:
    """Applies policy rules to a validated StatementSpec.

    Uses the Strategy pattern (GoF): :class:`PolicyConfig` is the swappable
    strategy; :class:`PolicyEngine` is the context that executes it.

    Args:
        config: Policy rules; defaults to an allow-everything config.
    """

    def __init__(self, config: PolicyConfig | None = None) -> None:
        self._config = config or PolicyConfig()

    @property
    def config(self) -> PolicyConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def apply(self, spec: StatementSpec) -> StatementSpec:
        """Apply all policy rules and return a (possibly modified) spec.

        Steps executed in order:

        1. Check table allowlist and read-only tables.
        2. Check column allow / deny lists.
        3. Enforce LIMIT.

        Raises:
            DisallowedTableError: If the table is not allowed, or is
                read-only and the statement writes.
            DisallowedColumnError: If a blocked column appears.
        """
        self._check_table(spec)
        self._check_columns(spec)
        return self._enforce_limit(spec)

    # ------------------------------------------------------------------
    # Table checks
    # ------------------------------------------------------------------

    def _check_table(self, spec: StatementSpec) -> None:
        table = spec.table
        if table is None:
            return
        allowed = self._config.allowed_tables
        if allowed and table not in allowed:
            raise DisallowedTableError(table, allowed)
        if spec.is_write and table in self._config.read_only_tables:
            raise DisallowedTableError(table, allowed, reason="read-only")

    # ------------------------------------------------------------------
    # Column checks (global + per-table)
    # ------------------------------------------------------------------

    def _check_columns(self, spec: StatementSpec) -> None:
        for column in spec.columns():
            self._assert_col_allowed(spec.table, column)

    def _assert_col_allowed(self, table_name: str | None, column: str) -> None:
        if "." in column:
            table_name, col_name = column.split(".", 1)
        else:
            col_name = column

        if col_name in self._config.denied_columns_for(table_name) or (
            column in self._config.denied_columns
        ):
            raise DisallowedColumnError(
                table_name, col_name, self._effective_allowed_columns(table_name)
            )

        tpol = self._config.tables.get(table_name) if table_name else None
        if tpol is not None and tpol.allowed_columns and col_name not in tpol.allowed_columns:
            raise DisallowedColumnError(
                table_name, col_name, self._effective_allowed_columns(table_name)
            )

    def _effective_allowed_columns(self, table_name: str | None) -> list[str]:
        """Return the columns a statement may reference for *table_name*.

        Only meaningful when the table has an explicit allowlist; otherwise
        every column not denied is allowed and an empty list is returned.
        """
        tpol = self._config.tables.get(table_name) if table_name else None
        if tpol is None or not tpol.allowed_columns:
            return []
        all_denied = set(self._config.denied_columns_for(table_name))
        return [c for c in tpol.allowed_columns if c not in all_denied]

    # ------------------------------------------------------------------
    # LIMIT enforcement
    # ------------------------------------------------------------------

    def _enforce_limit(self, spec: StatementSpec) -> StatementSpec:
        if spec.limit is None:
            if self._config.default_limit > 0 and spec.kind in _DEFAULT_LIMIT_KINDS:
                return spec.with_limit(self._config.default_limit)
            return spec
        max_limit = self._config.max_limit
        if max_limit is not None and spec.limit > max_limit:
            return spec.with_limit(max_limit)
        return spec
