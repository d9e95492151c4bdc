"""
Database connection and statement utilities.

A thin adapter over sqlite3 that gives the benchmark an explicit
open / prepare / bind / execute / exec cycle, with every failure turned
into one of the errors in refbench.errors. Every helper performs one
standard database action and raises on error.
"""
import re
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List

from .errors import BindError, ExecError, ExecuteError, OpenError, PrepareError

# Type tags for bind_value()
INTEGER = "INTEGER"
TEXT = "TEXT"

# SQLite primary result codes used for bind failures
SQLITE_OK = 0
SQLITE_ERROR = 1
SQLITE_MISMATCH = 20
SQLITE_RANGE = 25

# Outcomes of a bind call
BIND_OK = "bound"
BIND_BENIGN_FALSE = "benign-false"
BIND_FAILED = "failed"

_PARAM_PATTERN = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


def classify_bind(reported_ok: bool, error_code: int) -> str:
    """Classify the result of a bind call.

    A bind that reports failure while the store's last error code is
    SQLITE_OK is a benign false return and counts as success.

    Args:
        reported_ok: What the bind call itself returned
        error_code: The store's last error code right after the call

    Returns:
        One of BIND_OK, BIND_BENIGN_FALSE, BIND_FAILED
    """
    if reported_ok:
        return BIND_OK
    if error_code == SQLITE_OK:
        return BIND_BENIGN_FALSE
    return BIND_FAILED


def _error_code(exc: sqlite3.Error) -> int:
    # sqlite_errorcode is only set for errors raised by the SQLite library itself
    return getattr(exc, "sqlite_errorcode", None) or SQLITE_ERROR


class Statement:
    """A prepared statement with named parameters bound one at a time."""

    def __init__(self, sql: str, cursor: sqlite3.Cursor):
        self.sql = sql
        self.cursor = cursor
        self.param_names = _PARAM_PATTERN.findall(sql)
        self.bindings: Dict[str, Any] = {}
        self.error_code = SQLITE_OK
        self.error_message = "not an error"
        self.closed = False

    def bind(self, name: str, value: Any, type_tag: str) -> bool:
        """Bind VALUE to parameter NAME (with or without the leading colon).

        Returns False, and records the reason in error_code and
        error_message, when the parameter is unknown or the value does not
        match TYPE_TAG.
        """
        key = name[1:] if name.startswith(":") else name
        if key not in self.param_names:
            return self._fail(SQLITE_RANGE, f"column index out of range: no parameter named {name}")
        if type_tag == INTEGER:
            matches = isinstance(value, int) and not isinstance(value, bool)
        elif type_tag == TEXT:
            matches = isinstance(value, str)
        else:
            return self._fail(SQLITE_MISMATCH, f"unknown type tag {type_tag!r}")
        if not matches:
            return self._fail(SQLITE_MISMATCH, f"datatype mismatch: {type(value).__name__} is not {type_tag}")

        self.bindings[key] = value
        self.error_code = SQLITE_OK
        self.error_message = "not an error"
        return True

    def _fail(self, code, message):
        self.error_code = code
        self.error_message = message
        return False

    def close(self):
        if not self.closed:
            self.cursor.close()
            self.bindings.clear()
            self.closed = True


class Store:
    """A single SQLite connection with explicit transaction control.

    The connection runs with isolation_level=None, so sqlite3 never opens
    transactions on its own; BEGIN / COMMIT are issued through exec().
    """

    def __init__(self, connection: sqlite3.Connection, path: str):
        self._conn = connection
        self.path = path
        self._error_code = SQLITE_OK
        self._error_message = "not an error"

    @classmethod
    def open(cls, path) -> "Store":
        """Open (creating if needed) the store at PATH."""
        path = str(path)
        try:
            connection = sqlite3.connect(path, isolation_level=None)
        except sqlite3.Error as exc:
            raise OpenError(path, str(exc)) from exc
        return cls(connection, path)

    @property
    def closed(self) -> bool:
        return self._conn is None

    def close(self):
        """Close the connection. Safe to call more than once."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def last_error_code(self) -> int:
        return self._error_code

    def last_error_message(self) -> str:
        return self._error_message

    def _record(self, code, message):
        self._error_code = code
        self._error_message = message

    def _clear(self):
        self._record(SQLITE_OK, "not an error")

    @property
    def in_transaction(self) -> bool:
        return self._conn.in_transaction

    def prepare(self, sql: str) -> Statement:
        """Compile SQL without running it.

        The statement goes through EXPLAIN with every named parameter bound
        to NULL, which reports syntax errors and unknown tables or columns
        up front.
        """
        statement_params = dict.fromkeys(_PARAM_PATTERN.findall(sql))
        try:
            self._conn.execute(f"EXPLAIN {sql}", statement_params).close()
        except sqlite3.Error as exc:
            self._record(_error_code(exc), str(exc))
            raise PrepareError(sql, str(exc)) from exc
        self._clear()
        return Statement(sql, self._conn.cursor())

    def bind_value(self, statement: Statement, name: str, value: Any, type_tag: str) -> str:
        """Bind a value, raising BindError on a real failure.

        Returns:
            BIND_OK or BIND_BENIGN_FALSE
        """
        reported_ok = statement.bind(name, value, type_tag)
        if reported_ok:
            self._clear()
        else:
            self._record(statement.error_code, statement.error_message)
        outcome = classify_bind(reported_ok, self.last_error_code())
        if outcome == BIND_FAILED:
            raise BindError(name, value, self.last_error_message(), self.last_error_code())
        return outcome

    def execute(self, statement: Statement) -> sqlite3.Cursor:
        """Run a prepared statement with its current bindings."""
        try:
            cursor = statement.cursor.execute(statement.sql, statement.bindings)
        except sqlite3.Error as exc:
            self._record(_error_code(exc), str(exc))
            raise ExecuteError(statement.sql, str(exc), _error_code(exc)) from exc
        self._clear()
        return cursor

    def exec(self, sql: str) -> None:
        """Run one statement that takes no parameters and discard any rows."""
        try:
            self._conn.execute(sql).close()
        except sqlite3.Error as exc:
            self._record(_error_code(exc), str(exc))
            raise ExecError(sql, str(exc), _error_code(exc)) from exc
        self._clear()

    def rollback(self):
        """Roll back the open transaction, if there is one."""
        if self._conn is not None and self._conn.in_transaction:
            self.exec("ROLLBACK TRANSACTION;")

    @contextmanager
    def transaction(self):
        """BEGIN on entry, COMMIT on success, ROLLBACK and re-raise on error."""
        self.exec("BEGIN TRANSACTION;")
        try:
            yield self
            self.exec("COMMIT TRANSACTION;")
        except BaseException:
            self.rollback()
            raise

    def fetch_all(self, sql: str) -> List[sqlite3.Row]:
        """Prepare, run and fetch every row of a parameterless query."""
        statement = self.prepare(sql)
        try:
            statement.cursor.row_factory = sqlite3.Row
            return self.execute(statement).fetchall()
        finally:
            statement.close()

    def table_count(self, table_name: str) -> int:
        """Return SELECT COUNT(*) for TABLE_NAME."""
        # Table names come from the schema variants, never from user input
        statement = self.prepare(f"SELECT COUNT(*) FROM {table_name};")
        try:
            row = self.execute(statement).fetchone()
        finally:
            statement.close()
        return row[0]


def open_store(path, remove_existing: bool = False) -> Store:
    """Open the store at PATH, optionally deleting any previous file first.

    Args:
        path: Database file, or ':memory:'
        remove_existing: Delete an existing file at PATH before opening
    """
    if remove_existing and str(path) != ":memory:":
        existing = Path(path)
        if existing.exists():
            try:
                existing.unlink()
            except OSError as exc:
                raise OpenError(path, str(exc)) from exc
    return Store.open(path)


def create_memory_store() -> Store:
    """Create an in-memory store."""
    return Store.open(":memory:")
