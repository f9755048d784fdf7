"""Positional bind-parameter accumulator."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class BindParams:
    """Collects bind values in the order their placeholders are emitted.

    One instance lives for exactly one ``StatementBuilder.build`` call.
    Every :meth:`add` returns the placeholder token to splice into the SQL,
    which keeps the value count and the placeholder count in lockstep.
    """

    placeholder: str
    values: list[Any] = field(default_factory=list)

    def add(self, value: Any) -> str:
        """Store ``value`` and return its placeholder token."""
        self.values.append(value)
        return self.placeholder

    def as_tuple(self) -> tuple[Any, ...]:
        return tuple(self.values)

    def __len__(self) -> int:
        return len(self.values)
