"""
DELETE benchmark scenario.

Deletes every 11th row from each Base table with one predicate-filtered
statement. Population guarantees none of those rows is referenced, so
the delete can only differ between variants by the cost of checking
REFERENCES constraints.
"""
import sqlite3
import time

from .assertion_helpers import DELETE_MODULUS
from .errors import ExecError, UnexpectedConstraintViolation
from .result_formatter import BenchmarkResult
from .schema import DEFAULT_VARIANTS


def delete_sql(table_name):
    """The bulk DELETE timed for TABLE_NAME."""
    # Table names come from the schema variants, never from user input
    return f"DELETE FROM {table_name} WHERE base_id % {DELETE_MODULUS} = 0;"


def timed_delete(store, table_name, fk_column_count=None):
    """Run the bulk DELETE on TABLE_NAME in its own transaction and time it.

    The clock starts after BEGIN and stops after COMMIT. elapsed_seconds
    has whole-second resolution; precise_seconds keeps the perf counter
    reading.

    Raises:
        UnexpectedConstraintViolation: If a REFERENCES check fails. The
            transaction is rolled back, nothing is retried.
    """
    rows_before = store.table_count(table_name)
    sql = delete_sql(table_name)
    try:
        with store.transaction():
            start_time = int(time.time())
            precise_start = time.perf_counter()
            store.exec(sql)
        precise_seconds = time.perf_counter() - precise_start
        end_time = int(time.time())
    except ExecError as exc:
        if isinstance(exc.__cause__, sqlite3.IntegrityError):
            raise UnexpectedConstraintViolation(table_name, sql, exc.store_message) from exc
        raise
    rows_after = store.table_count(table_name)

    return BenchmarkResult(
        table_name,
        max(end_time - start_time, 0),
        precise_seconds=precise_seconds,
        rows_before=rows_before,
        rows_after=rows_after,
        fk_column_count=fk_column_count,
    )


def run_delete_benchmarks(store, variants=DEFAULT_VARIANTS, on_result=None):
    """Time the DELETE on every variant's Base table, in variant order.

    Args:
        store: Open Store with populated tables
        variants: SchemaVariant records, deleted in this order
        on_result: Called with each BenchmarkResult before the next delete starts

    Returns:
        List of BenchmarkResult
    """
    results = []
    for variant in variants:
        result = timed_delete(store, variant.base_table, variant.fk_column_count)
        results.append(result)
        if on_result is not None:
            on_result(result)
    return results
