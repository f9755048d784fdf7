"""Result materialization: drain a statement handle into row dicts."""
from __future__ import annotations

from typing import Any

from chaindb.drivers.base import Driver, StatementHandle


def materialize(driver: Driver, handle: StatementHandle) -> list[dict[str, Any]]:
    """Fetch every remaining row of ``handle``.

    Column order inside each row follows the driver.  Statements that
    return no result set, and queries matching nothing, both give ``[]``.
    """
    rows: list[dict[str, Any]] = []
    if not handle.returns_rows:
        return rows
    while (row := driver.fetch_next_row(handle)) is not None:
        rows.append(row)
    return rows
