"""Identifier syntax validator.

Table and column names are spliced into the statement text, so they must
be plain identifiers: a letter or underscore followed by letters, digits,
underscores or ``$``, optionally qualified once with a dot
(``schema.table`` / ``table.column``).  Anything else (quotes, spaces,
comments, semicolons) is rejected before compilation.
"""

from __future__ import annotations

import re
from typing import Any

from chaindb.errors import InvalidIdentifierError

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*(\.[A-Za-z_][A-Za-z0-9_$]*)?$")


def is_identifier(name: Any) -> bool:
    """Return ``True`` if ``name`` is a plain (optionally dotted) identifier."""
    return isinstance(name, str) and _IDENTIFIER_RE.match(name) is not None


class IdentifierValidator:
    """Checks table and column names for identifier syntax."""

    def assert_table(self, name: Any) -> None:
        if not is_identifier(name):
            raise InvalidIdentifierError(name, "table")

    def assert_column(self, name: Any) -> None:
        if not is_identifier(name):
            raise InvalidIdentifierError(name, "column")
