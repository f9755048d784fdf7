"""Equality-condition accumulator for one request."""
from __future__ import annotations

from collections.abc import Iterator
from typing import Any


class ConditionSet:
    """Ordered ``column -> value`` equality filters.

    Calling :meth:`add` again for a column replaces its value but keeps the
    column at its original position, so clause order and bind order follow
    the first call for each column.
    """

    def __init__(self) -> None:
        self._conditions: dict[str, Any] = {}

    def add(self, column: str, value: Any) -> None:
        self._conditions[column] = value

    def clear(self) -> None:
        self._conditions.clear()

    def as_dict(self) -> dict[str, Any]:
        """Return a copy of the accumulated conditions."""
        return dict(self._conditions)

    def __len__(self) -> int:
        return len(self._conditions)

    def __bool__(self) -> bool:
        return bool(self._conditions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._conditions)

    def __repr__(self) -> str:
        return f"ConditionSet({self._conditions!r})"
