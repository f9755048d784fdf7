"""Unit tests for the Database / Query facade over a recording driver."""

from __future__ import annotations

import gc
import logging
import threading

import pytest

from chaindb import session
from chaindb.database import Database, Query
from chaindb.errors import (
    CompilationError,
    ConfigurationError,
    DisallowedTableError,
    ExecutionError,
    InvalidIdentifierError,
    InvalidLimitError,
    PrepareError,
    SchemaError,
)
from chaindb.policy.engine import PolicyConfig
from tests.fixtures import RecordingDriver, load_schema_snapshot

ROWS = [
    {"id": 1, "name": "Ada", "tier": "gold"},
    {"id": 2, "name": "Brian", "tier": "standard"},
]


# ---------------------------------------------------------------------------
# Statements reaching the driver
# ---------------------------------------------------------------------------


def test_get_without_conditions(db, driver):
    assert db.get("t") == []
    assert driver.last_statement == ("SELECT * FROM t", ())


def test_get_with_chained_conditions(db, driver):
    db.where("id", 7).where("name", "x").get("t")
    assert driver.last_statement == ("SELECT * FROM t WHERE id = ? AND name = ?", (7, "x"))


def test_repeated_where_overwrites_value(db, driver):
    db.where("id", 1).where("name", "x").where("id", 2).get("t")
    assert driver.last_statement == ("SELECT * FROM t WHERE id = ? AND name = ?", (2, "x"))


def test_get_with_limit(db, driver):
    db.get("t", 10)
    assert driver.last_statement == ("SELECT * FROM t LIMIT ?", (10,))


def test_get_with_zero_limit_binds_zero(db, driver):
    db.get("t", 0)
    assert driver.last_statement == ("SELECT * FROM t LIMIT ?", (0,))


def test_delete_with_zero_limit_binds_zero(db, driver):
    db.where("tier", "x").delete("t", 0)
    assert driver.last_statement == ("DELETE FROM t WHERE tier = ? LIMIT ?", ("x", 0))


def test_insert_ignores_conditions_and_warns(db, driver, caplog):
    with caplog.at_level(logging.WARNING, logger="chaindb.database"):
        new_id = db.where("id", 9).insert("t", {"a": 1, "b": 2})
    assert new_id == 1
    assert driver.last_statement == ("INSERT into t(a, b) VALUES(?, ?)", (1, 2))
    assert "Ignoring 1 condition(s) on INSERT into t" in caplog.text


def test_update_binds_data_then_conditions(db, driver):
    assert db.where("id", 1).update("t", {"a": 5}) is True
    assert driver.last_statement == ("UPDATE t SET a = ? WHERE id = ?", (5, 1))


def test_delete_with_condition(db, driver):
    assert db.where("id", 1).delete("t") is True
    assert driver.last_statement == ("DELETE FROM t WHERE id = ?", (1,))


def test_query_appends_conditions(db, driver):
    db.where("tier", "gold").query("SELECT name FROM customers", 5)
    assert driver.last_statement == (
        "SELECT name FROM customers WHERE tier = ? LIMIT ?",
        ("gold", 5),
    )


def test_raw_query_passes_text_and_params_through(db, driver):
    db.raw_query("SELECT * FROM t WHERE a > ? OR b < ?", [1, 2])
    assert driver.last_statement == ("SELECT * FROM t WHERE a > ? OR b < ?", (1, 2))


def test_raw_query_bypasses_conditions():
    driver = RecordingDriver()
    query = Database(driver).where("id", 3)
    query.raw_query("SELECT 1")
    assert driver.last_statement == ("SELECT 1", ())
    assert query.conditions == {}


# ---------------------------------------------------------------------------
# Return values
# ---------------------------------------------------------------------------


def test_get_materializes_rows():
    db = Database(RecordingDriver(rows=ROWS))
    rows = db.get("customers")
    assert rows == ROWS
    assert list(rows[0]) == ["id", "name", "tier"]


def test_zero_matching_rows_is_empty_list(db):
    assert db.where("id", 404).get("customers") == []


def test_update_and_delete_report_false_when_nothing_changed():
    db = Database(RecordingDriver(rowcount=0))
    assert db.where("id", 1).update("t", {"a": 5}) is False
    assert db.where("id", 1).delete("t") is False


def test_insert_returns_none_when_no_row_inserted():
    db = Database(RecordingDriver(rowcount=0, insert_id=42))
    assert db.insert("t", {"a": 1}) is None


def test_insert_returns_driver_id():
    db = Database(RecordingDriver(insert_id=42))
    assert db.insert("t", {"a": 1}) == 42
    assert db.get_insert_id() == 42


def test_escape_uses_driver_quoting(db):
    assert db.escape("O'Brien") == "'O''Brien'"


# ---------------------------------------------------------------------------
# Reset protocol
# ---------------------------------------------------------------------------


def test_query_is_reset_after_success(db, driver):
    query = db.where("id", 7)
    query.get("t")
    query.get("t")
    assert driver.last_statement == ("SELECT * FROM t", ())


def test_query_is_reset_after_driver_failure():
    driver = RecordingDriver(fail_with=ExecutionError("constraint failed"))
    query = Database(driver).where("id", 7)
    with pytest.raises(ExecutionError):
        query.delete("t")
    assert query.conditions == {}
    driver.fail_with = None
    query.get("t")
    assert driver.last_statement == ("SELECT * FROM t", ())


def test_query_is_reset_after_validation_failure(db, driver):
    query = db.where("id", 7)
    with pytest.raises(InvalidIdentifierError):
        query.get("bad table")
    assert query.conditions == {}
    assert driver.statements == []


def test_query_is_reset_after_compilation_failure(db, driver):
    query = db.where("id", 7)
    with pytest.raises(CompilationError):
        query.update("t", {})
    assert query.conditions == {}
    assert driver.statements == []


def test_database_keeps_no_conditions_between_calls(db, driver):
    db.where("id", 1)  # started but never executed
    db.get("t")
    assert driver.last_statement == ("SELECT * FROM t", ())


def test_unexecuted_query_logs_discarded_conditions(db, caplog):
    with caplog.at_level(logging.DEBUG, logger="chaindb.database"):
        db.where("id", 1).where("tier", "gold")
        gc.collect()
    assert "Discarding 2 unexecuted condition(s)" in caplog.text


def test_executed_query_logs_nothing_when_dropped(db, caplog):
    with caplog.at_level(logging.DEBUG, logger="chaindb.database"):
        db.where("id", 1).get("t")
        gc.collect()
    assert "Discarding" not in caplog.text


def test_new_query_starts_empty(db):
    assert isinstance(db.new_query(), Query)
    assert db.new_query().conditions == {}


# ---------------------------------------------------------------------------
# Guards before the driver
# ---------------------------------------------------------------------------


def test_invalid_limit_never_reaches_driver(db, driver):
    with pytest.raises(InvalidLimitError):
        db.get("t", "10; DROP TABLE t")
    assert driver.statements == []


def test_injection_in_column_never_reaches_driver(db, driver):
    with pytest.raises(InvalidIdentifierError):
        db.where("id = 1 OR 1", 1).delete("t")
    assert driver.statements == []


def test_policy_violation_never_reaches_driver(driver):
    db = Database(driver, policy=PolicyConfig(read_only_tables=["audit"]))
    with pytest.raises(DisallowedTableError):
        db.where("id", 1).delete("audit")
    assert driver.statements == []


def test_schema_snapshot_enforced(driver):
    db = Database(driver, snapshot=load_schema_snapshot())
    with pytest.raises(SchemaError):
        db.get("invoices")
    db.where("tier", "gold").get("customers")
    assert driver.last_statement == ("SELECT * FROM customers WHERE tier = ?", ("gold",))


def test_policy_max_limit_clamps_bound_value(driver):
    db = Database(driver, policy=PolicyConfig(max_limit=100))
    db.get("t", 5000)
    assert driver.last_statement == ("SELECT * FROM t LIMIT ?", (100,))


def test_prepare_error_propagates_and_logs(caplog):
    failure = PrepareError("Problem preparing query: near x", sql="x", diagnostic="near x")
    db = Database(RecordingDriver(fail_with=failure))
    with caplog.at_level(logging.WARNING, logger="chaindb.execute.executor"):
        with pytest.raises(PrepareError) as exc_info:
            db.raw_query("x")
    assert exc_info.value.diagnostic == "near x"
    assert "Problem preparing query" in caplog.text


def test_mysql_dialect_uses_format_placeholders():
    driver = RecordingDriver(dialect="mysql")
    Database(driver).where("id", 1).delete("t", 1)
    assert driver.last_statement == ("DELETE FROM t WHERE id = %s LIMIT %s", (1, 1))


def test_unknown_dialect_fails_at_construction():
    with pytest.raises(CompilationError):
        Database(RecordingDriver(dialect="oracle"))


def test_failed_construction_closes_opened_driver(monkeypatch):
    opened = RecordingDriver(dialect="oracle")
    monkeypatch.setattr("chaindb.database.SQLiteDriver", lambda *args, **kwargs: opened)
    with pytest.raises(CompilationError):
        Database.sqlite(":memory:")
    assert opened.closed
    assert Database.get_instance() is None


def test_failed_from_url_closes_opened_driver(monkeypatch):
    pytest.importorskip("sqlalchemy")
    opened = RecordingDriver(dialect="mssql")
    monkeypatch.setattr(
        "chaindb.drivers.alchemy.SQLAlchemyDriver", lambda *args, **kwargs: opened
    )
    with pytest.raises(CompilationError):
        Database.from_url("mssql+pyodbc://example")
    assert opened.closed


# ---------------------------------------------------------------------------
# Handle release
# ---------------------------------------------------------------------------


def test_handles_released_after_reads_and_writes():
    driver = RecordingDriver(rows=ROWS)
    db = Database(driver)
    db.get("customers")
    db.where("id", 1).update("customers", {"tier": "gold"})
    db.insert("customers", {"name": "Dana"})
    assert [h.sql for h in driver.released] == [sql for sql, _ in driver.statements]


def test_handle_released_when_execution_fails():
    driver = RecordingDriver(fail_with=ExecutionError("constraint failed"))
    with pytest.raises(ExecutionError):
        Database(driver).where("id", 1).delete("t")
    assert len(driver.released) == 1


# ---------------------------------------------------------------------------
# Lifecycle and session state
# ---------------------------------------------------------------------------


def test_close_is_idempotent(driver):
    db = Database(driver)
    db.close()
    db.close()
    assert db.closed


def test_calls_after_close_fail(driver):
    db = Database(driver)
    db.close()
    with pytest.raises(ExecutionError):
        db.get("t")


def test_context_manager_closes(driver):
    with Database(driver) as db:
        db.get("t")
    assert driver.closed


def test_get_instance_tracks_latest_open_database():
    first = Database(RecordingDriver())
    assert Database.get_instance() is first
    second = Database(RecordingDriver())
    assert Database.get_instance() is second
    first.close()
    assert Database.get_instance() is second
    second.close()
    assert Database.get_instance() is None


def test_session_holds_only_a_weak_reference():
    Database(RecordingDriver())
    gc.collect()
    assert session.get_active() is None


def test_reflect_unsupported_by_plain_driver(db):
    with pytest.raises(ConfigurationError):
        db.reflect()


def test_threads_with_own_queries_do_not_mix_conditions(driver):
    db = Database(driver)
    errors: list[Exception] = []

    def worker(n: int) -> None:
        try:
            for _ in range(50):
                db.where("id", n).where("worker", n).get("t")
        except Exception as exc:  # pragma: no cover - surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(driver.statements) == 200
    for sql, params in driver.statements:
        assert sql == "SELECT * FROM t WHERE id = ? AND worker = ?"
        assert params[0] == params[1]
