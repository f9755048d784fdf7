"""Pydantic model for one request against a table.

A ``StatementSpec`` is the immutable description of a single executing call:
which kind of statement, which table (or which caller-supplied SQL prefix),
the row data, the equality conditions and the row limit.  The facade builds
one per call from its accumulated state; the validator, policy engine and
compiler only ever see this value.

Mapping order is preserved end to end: the order of ``data`` and
``conditions`` decides both the clause order and the bind order.
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from chaindb.errors import InvalidLimitError, ValidationError


class StatementKind(str, Enum):
    """The statement shapes the builder knows how to assemble."""

    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    QUERY = "query"


#: Kinds that modify table contents.
WRITE_KINDS: frozenset[StatementKind] = frozenset(
    {StatementKind.INSERT, StatementKind.UPDATE, StatementKind.DELETE}
)


def coerce_limit(value: Any) -> int | None:
    """Normalise a row limit to a non-negative ``int``.

    Integers pass through, integral floats and numeric strings are coerced.
    Booleans, fractional floats and non-numeric text are rejected.  Only
    ``None`` means "no limit"; ``0`` is a real limit that matches no rows.

    Raises:
        InvalidLimitError: If ``value`` cannot be used as a row limit.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidLimitError(value)
    if isinstance(value, int):
        limit = value
    elif isinstance(value, float) and value.is_integer():
        limit = int(value)
    elif isinstance(value, str):
        try:
            limit = int(value.strip())
        except ValueError:
            raise InvalidLimitError(value) from None
    else:
        raise InvalidLimitError(value)
    if limit < 0:
        raise InvalidLimitError(value)
    return limit


class StatementSpec(BaseModel):
    """Everything needed to compile one statement.

    Attributes:
        kind: Statement shape.
        table: Target table (all kinds except ``query``).
        prefix: Caller-supplied SQL text (``query`` kind only).
        data: Row data for ``insert`` / ``update``, in column order.
        conditions: Equality filters, in first-insertion order.
        limit: Optional row limit, always bound as a parameter.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: StatementKind
    table: str | None = None
    prefix: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    conditions: dict[str, Any] = Field(default_factory=dict)
    limit: int | None = None

    @field_validator("limit", mode="before")
    @classmethod
    def _coerce_limit(cls, value: Any) -> int | None:
        # InvalidLimitError is not a ValueError, so pydantic lets it through.
        return coerce_limit(value)

    @model_validator(mode="after")
    def _check_target(self) -> "StatementSpec":
        if self.kind is StatementKind.QUERY:
            if not self.prefix:
                raise ValueError("query statements need SQL text")
        elif not self.table:
            raise ValueError(f"{self.kind.value} statements need a table name")
        return self

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def create(cls, kind: StatementKind, **fields: Any) -> "StatementSpec":
        """Build and validate a spec, converting pydantic errors.

        Raises:
            ValidationError: If the fields do not form a valid statement.
            InvalidLimitError: If ``limit`` is not a usable row limit.
        """
        try:
            return cls.model_validate({"kind": kind, **fields})
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Statement is invalid: {exc}",
                code="INVALID_STATEMENT",
                details={"errors": exc.errors(include_url=False)},
            ) from exc

    @property
    def is_write(self) -> bool:
        """True for ``insert``, ``update`` and ``delete`` statements."""
        return self.kind in WRITE_KINDS

    def columns(self) -> list[str]:
        """Return every column name referenced, data columns first."""
        names = list(self.data)
        names.extend(c for c in self.conditions if c not in self.data)
        return names

    def with_limit(self, limit: int | None) -> "StatementSpec":
        """Return a copy of this spec with a different row limit."""
        return self.model_copy(update={"limit": limit})
