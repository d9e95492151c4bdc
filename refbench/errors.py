"""
Error types for the REFERENCES DELETE benchmark.

Every failure in a run is fatal. Each error carries the failing
operation, the offending SQL or parameter, and SQLite's own message and
result code when one is available.
"""


class BenchmarkError(Exception):
    """Base class for all benchmark failures."""


class OpenError(BenchmarkError):
    """The store could not be created or opened."""

    def __init__(self, path, store_message):
        self.path = str(path)
        self.store_message = store_message
        super().__init__(f"Can't open/create the database \"{self.path}\".  {store_message}")


class PrepareError(BenchmarkError):
    """A statement was rejected at prepare time."""

    def __init__(self, sql, store_message):
        self.sql = sql
        self.store_message = store_message
        super().__init__(f"Can't prepare \"{sql}\".  {store_message}")


class BindError(BenchmarkError):
    """A value could not be bound to a named parameter."""

    def __init__(self, param_name, value, store_message, store_error_code):
        self.param_name = param_name
        self.value = value
        self.store_message = store_message
        self.store_error_code = store_error_code
        super().__init__(
            f"Can't bind \"{value}\" to field {param_name}.  "
            f"{store_message} ({store_error_code})"
        )


class ExecuteError(BenchmarkError):
    """A prepared statement failed to execute."""

    def __init__(self, sql, store_message, store_error_code=None):
        self.sql = sql
        self.store_message = store_message
        self.store_error_code = store_error_code
        super().__init__(f"Failed to execute \"{sql}\".  {store_message}")


class ExecError(BenchmarkError):
    """A parameterless statement failed."""

    def __init__(self, sql, store_message, store_error_code=None):
        self.sql = sql
        self.store_message = store_message
        self.store_error_code = store_error_code
        super().__init__(f"Can't execute \"{sql}\".  {store_message}")


class PopulationIntegrityViolation(BenchmarkError):
    """A row count did not advance by exactly the expected amount."""

    def __init__(self, table_name, expected, actual, detail=None):
        self.table_name = table_name
        self.expected = expected
        self.actual = actual
        message = f"Insert into {table_name} didn't increase the count as expected (expected {expected}, got {actual})."
        if detail:
            message = f"{message}  {detail}"
        super().__init__(message)


class UnexpectedConstraintViolation(BenchmarkError):
    """A delete that population guaranteed to be safe hit a constraint."""

    def __init__(self, table_name, sql, store_message):
        self.table_name = table_name
        self.sql = sql
        self.store_message = store_message
        super().__init__(
            f"Unexpected constraint violation deleting from {table_name} "
            f"with \"{sql}\".  {store_message}"
        )
