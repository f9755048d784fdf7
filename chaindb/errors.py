"""Custom exception hierarchy for chaindb.

All public errors inherit from ChainDBError so callers can catch the base
class for any chaindb-specific failure.  Driver exceptions are always
chained (``raise ... from exc``) so the original traceback is preserved.
"""
from __future__ import annotations

from typing import Any


class ChainDBError(Exception):
    """Base exception for all chaindb errors."""


class ConfigurationError(ChainDBError):
    """Raised when settings cannot be turned into a working Database."""


class DriverError(ChainDBError):
    """Base for failures reported by the underlying SQL driver.

    Args:
        message: Human-readable description.
        sql: The statement text that was being prepared or executed.
        diagnostic: The driver's own error text.
    """

    def __init__(
        self,
        message: str,
        sql: str | None = None,
        diagnostic: str | None = None,
    ) -> None:
        super().__init__(message)
        self.sql = sql
        self.diagnostic = diagnostic or ""


class PrepareError(DriverError):
    """Raised when the driver rejects the statement text itself.

    Covers malformed SQL (syntax errors, placeholder mismatches) and
    references to unknown tables or columns.  Never retried.
    """


class ExecutionError(DriverError):
    """Raised when a prepared statement fails while running.

    Covers constraint violations, lost connections and bind-count
    mismatches.
    """


class ValidationError(ChainDBError):
    """Raised when a statement fails identifier, schema or policy checks.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. DISALLOWED_COLUMN).
        details: Extra context for the caller.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response suitable for an API layer."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class InvalidIdentifierError(ValidationError):
    """Raised when a table or column name is not a plain SQL identifier."""

    def __init__(self, identifier: Any, kind: str) -> None:
        super().__init__(
            f"Invalid {kind} name: {identifier!r}.",
            code="INVALID_IDENTIFIER",
            details={"identifier": identifier, "kind": kind},
        )


class InvalidLimitError(ValidationError):
    """Raised when a row limit is not a non-negative integer."""

    def __init__(self, limit: Any) -> None:
        super().__init__(
            f"Row limit must be a non-negative integer, got {limit!r}.",
            code="INVALID_LIMIT",
            details={"limit": limit},
        )


class SchemaError(ValidationError):
    """Raised when a statement references an unknown table or column."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code="SCHEMA_ERROR", details=details or {})


class DisallowedColumnError(ValidationError):
    """Raised when a statement references a column blocked by policy."""

    def __init__(
        self,
        table: str | None,
        column: str,
        allowed_columns: list[str],
    ) -> None:
        where = f" on table '{table}'" if table else ""
        super().__init__(
            f"Column '{column}'{where} is not allowed.",
            code="DISALLOWED_COLUMN",
            details={
                "table": table,
                "column": column,
                "allowed_columns": allowed_columns,
            },
        )


class DisallowedTableError(ValidationError):
    """Raised when a statement references a table blocked by policy."""

    def __init__(
        self,
        table: str,
        allowed_tables: list[str],
        reason: str = "not allowed",
    ) -> None:
        super().__init__(
            f"Table '{table}' is {reason}.",
            code="DISALLOWED_TABLE",
            details={"table": table, "allowed_tables": allowed_tables},
        )


class CompilationError(ChainDBError):
    """Raised when a statement cannot be assembled.

    Args:
        message: Human-readable description.
        clause: The clause being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause
