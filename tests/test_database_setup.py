"""
Tests for the sqlite3 store adapter.
"""
import sqlite3

import pytest

from refbench.database_setup import (
    BIND_BENIGN_FALSE,
    BIND_FAILED,
    BIND_OK,
    INTEGER,
    SQLITE_MISMATCH,
    SQLITE_OK,
    SQLITE_RANGE,
    TEXT,
    Store,
    classify_bind,
    open_store,
)
from refbench.errors import BindError, ExecError, ExecuteError, OpenError, PrepareError


def test_classify_bind():
    """Test every bind outcome"""
    assert classify_bind(True, SQLITE_OK) == BIND_OK
    assert classify_bind(True, SQLITE_MISMATCH) == BIND_OK
    assert classify_bind(False, SQLITE_OK) == BIND_BENIGN_FALSE
    assert classify_bind(False, SQLITE_MISMATCH) == BIND_FAILED


def test_open_missing_directory(tmp_path):
    """Test that an unopenable path raises OpenError"""
    with pytest.raises(OpenError) as excinfo:
        Store.open(tmp_path / "no_such_dir" / "db.sqlite3")
    assert "no_such_dir" in str(excinfo.value)


def test_close_is_idempotent(memory_store):
    """Test that close() can be called twice"""
    memory_store.close()
    memory_store.close()
    assert memory_store.closed


def test_context_manager_closes(tmp_path):
    """Test that leaving the with block closes the store, even on error"""
    with pytest.raises(RuntimeError):
        with open_store(tmp_path / "db.sqlite3") as store:
            raise RuntimeError("boom")
    assert store.closed


def test_open_store_removes_existing(tmp_path):
    """Test that a previous store file is deleted before opening"""
    path = tmp_path / "db.sqlite3"
    with open_store(path) as store:
        store.exec("CREATE TABLE leftover (x INTEGER);")

    with open_store(path, remove_existing=True) as store:
        rows = store.fetch_all("SELECT name FROM sqlite_master WHERE type = 'table';")
    assert rows == []


def test_open_store_unremovable_path(tmp_path):
    """Test that a previous store that cannot be deleted raises OpenError"""
    path = tmp_path / "db.sqlite3"
    path.mkdir()

    with pytest.raises(OpenError) as excinfo:
        open_store(path, remove_existing=True)
    assert excinfo.value.path == str(path)
    assert path.is_dir()


def test_prepare_rejects_bad_sql(memory_store):
    """Test that syntax errors and unknown tables fail at prepare time"""
    with pytest.raises(PrepareError) as excinfo:
        memory_store.prepare("SELEKT 1;")
    assert excinfo.value.sql == "SELEKT 1;"

    with pytest.raises(PrepareError) as excinfo:
        memory_store.prepare("INSERT INTO missing (a) VALUES (:a);")
    assert "missing" in excinfo.value.store_message
    assert memory_store.last_error_code() != SQLITE_OK


def test_prepare_does_not_execute(memory_store):
    """Test that prepare only compiles the statement"""
    memory_store.exec("CREATE TABLE t (a INTEGER);")
    statement = memory_store.prepare("INSERT INTO t (a) VALUES (:a);")
    statement.close()
    assert memory_store.table_count("t") == 0


def test_bind_and_execute(memory_store):
    """Test binding named parameters and executing"""
    memory_store.exec("CREATE TABLE t (a INTEGER, b TEXT);")
    statement = memory_store.prepare("INSERT INTO t (a, b) VALUES (:a, :b);")
    assert statement.param_names == ['a', 'b']
    assert memory_store.bind_value(statement, ":a", 1001, INTEGER) == BIND_OK
    assert memory_store.bind_value(statement, "b", "1001", TEXT) == BIND_OK
    memory_store.execute(statement)
    statement.close()

    rows = memory_store.fetch_all("SELECT a, b FROM t;")
    assert [tuple(row) for row in rows] == [(1001, "1001")]


def test_bind_type_mismatch(memory_store):
    """Test that a value of the wrong type raises BindError"""
    memory_store.exec("CREATE TABLE t (a INTEGER);")
    statement = memory_store.prepare("INSERT INTO t (a) VALUES (:a);")
    with pytest.raises(BindError) as excinfo:
        memory_store.bind_value(statement, ":a", "1001", INTEGER)
    assert excinfo.value.param_name == ":a"
    assert excinfo.value.value == "1001"
    assert excinfo.value.store_error_code == SQLITE_MISMATCH
    statement.close()


def test_bind_unknown_parameter(memory_store):
    """Test that binding a parameter the statement lacks raises BindError"""
    memory_store.exec("CREATE TABLE t (a INTEGER);")
    statement = memory_store.prepare("INSERT INTO t (a) VALUES (:a);")
    with pytest.raises(BindError) as excinfo:
        memory_store.bind_value(statement, ":zz", 1, INTEGER)
    assert excinfo.value.store_error_code == SQLITE_RANGE
    statement.close()


def test_bind_benign_false_is_success(memory_store):
    """Test that a false return with error code 0 counts as success"""

    class QuirkyStatement:
        error_code = SQLITE_OK
        error_message = "not an error"

        def bind(self, name, value, type_tag):
            return False

    assert memory_store.bind_value(QuirkyStatement(), ":a", 1, INTEGER) == BIND_BENIGN_FALSE
    assert memory_store.last_error_code() == SQLITE_OK


def test_execute_missing_binding(memory_store):
    """Test that executing with an unbound parameter raises ExecuteError"""
    memory_store.exec("CREATE TABLE t (a INTEGER NOT NULL);")
    statement = memory_store.prepare("INSERT INTO t (a) VALUES (:a);")
    # nothing bound, so :a is missing
    with pytest.raises(ExecuteError) as excinfo:
        memory_store.execute(statement)
    assert excinfo.value.sql == statement.sql
    statement.close()


def test_exec_failure(memory_store):
    """Test that exec() raises ExecError with the SQL and store message"""
    with pytest.raises(ExecError) as excinfo:
        memory_store.exec("DROP TABLE nothing_here;")
    assert excinfo.value.sql == "DROP TABLE nothing_here;"
    assert "nothing_here" in excinfo.value.store_message
    assert isinstance(excinfo.value.__cause__, sqlite3.Error)


def test_transaction_commits(memory_store):
    """Test that a clean transaction block commits"""
    memory_store.exec("CREATE TABLE t (a INTEGER);")
    with memory_store.transaction():
        assert memory_store.in_transaction
        memory_store.exec("INSERT INTO t (a) VALUES (1);")
    assert not memory_store.in_transaction
    assert memory_store.table_count("t") == 1


def test_transaction_rolls_back_on_error(memory_store):
    """Test that an error inside a transaction block rolls it back"""
    memory_store.exec("CREATE TABLE t (a INTEGER);")
    with pytest.raises(ExecError):
        with memory_store.transaction():
            memory_store.exec("INSERT INTO t (a) VALUES (1);")
            memory_store.exec("INSERT INTO nowhere (a) VALUES (1);")
    assert not memory_store.in_transaction
    assert memory_store.table_count("t") == 0


def test_table_count(memory_store):
    """Test COUNT(*) through prepare/execute/fetch"""
    memory_store.exec("CREATE TABLE t (a INTEGER);")
    memory_store.exec("INSERT INTO t (a) VALUES (1);")
    memory_store.exec("INSERT INTO t (a) VALUES (2);")
    assert memory_store.table_count("t") == 2
