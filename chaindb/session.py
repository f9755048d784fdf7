"""Process-wide handle on the most recently opened Database.

Passing a ``Database`` explicitly to the code that needs it is the
preferred style.  This module exists for call sites that cannot receive
one (legacy helpers, scripts): every ``Database`` registers itself on
construction and unregisters on ``close()``.  Only a weak reference is
kept, so the registry never keeps a connection alive by itself.

Only one "current" instance is tracked per process; opening a second
``Database`` replaces the first as the current one.
"""
from __future__ import annotations

import threading
import weakref
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chaindb.database import Database

_lock = threading.Lock()
_active: weakref.ReferenceType[Database] | None = None


def set_active(db: Database) -> None:
    """Make ``db`` the current instance."""
    global _active
    with _lock:
        _active = weakref.ref(db)


def get_active() -> Database | None:
    """Return the current instance, or ``None`` if none is open."""
    with _lock:
        return _active() if _active is not None else None


def clear_active(db: Database | None = None) -> None:
    """Forget the current instance.

    When ``db`` is given, only clear if it is still the current one.
    """
    global _active
    with _lock:
        if db is None or (_active is not None and _active() is db):
            _active = None
