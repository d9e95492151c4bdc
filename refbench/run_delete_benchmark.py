"""
Performance comparison of DELETE FROM a table referenced by:

- no other table (0 REFERENCES constraints),
- 1 column in another table (1 REFERENCES constraint),
- 10 columns in another table (10 REFERENCES constraints).

The run is a strict pipeline:

    uninitialized -> schema-created -> bases-populated -> dependents-populated
    -> deleted(0) -> deleted(1) -> deleted(10) -> done

Any failure moves it to aborted. The store is closed on every exit path.

Usage:
    python -m refbench [--json results.json] [--dump]

Environment Variables:
    REFBENCH_DATABASE_PATH: SQLite file to recreate (default: db1.sqlite3)
    REFBENCH_COUNT: Rows per Base table (default: 200000)
"""

import argparse
import sys
from pathlib import Path

from .assertion_helpers import assert_population_consistent
from .benchmark_scenarios import timed_delete
from .config import get_default_count, get_default_database_path
from .data_generator import block_starts, canary_table, populate_bases, populate_dependents
from .database_setup import open_store
from .errors import BenchmarkError
from .result_formatter import (
    BenchmarkResults,
    format_count_line,
    format_delete_line,
    format_dump,
)
from .schema import DEFAULT_VARIANTS, build_schema

UNINITIALIZED = "uninitialized"
SCHEMA_CREATED = "schema-created"
BASES_POPULATED = "bases-populated"
DEPENDENTS_POPULATED = "dependents-populated"
DONE = "done"
ABORTED = "aborted"


def deleted_state(variant):
    return f"deleted({variant.tag})"


def pipeline_states(variants=DEFAULT_VARIANTS):
    """Every state of a run over VARIANTS, in the only legal order."""
    return (
        [UNINITIALIZED, SCHEMA_CREATED, BASES_POPULATED, DEPENDENTS_POPULATED]
        + [deleted_state(variant) for variant in variants]
        + [DONE]
    )


class DeleteBenchmarkRun:
    """
    One benchmark run over an open store.

    Each phase is its own method and may only run when the previous one
    has completed. A BenchmarkError from any phase leaves the run aborted.
    """

    def __init__(self, store, count, variants=DEFAULT_VARIANTS, out=None):
        """
        Args:
            store: Open Store, owned by the caller
            count: Rows per Base table
            variants: SchemaVariant records, deleted in this order
            out: Stream for progress lines (default: sys.stdout)
        """
        self.store = store
        self.count = count
        self.variants = tuple(variants)
        self.out = out if out is not None else sys.stdout
        self.states = pipeline_states(self.variants)
        self.state = UNINITIALIZED
        self.results = BenchmarkResults(count, store.path)

    def _emit(self, line):
        print(line, file=self.out)

    def _next_state(self):
        if self.state == ABORTED:
            return None
        index = self.states.index(self.state)
        if index + 1 >= len(self.states):
            return None
        return self.states[index + 1]

    def _check_transition(self, target):
        expected = self._next_state()
        if target != expected:
            raise RuntimeError(f"Illegal transition {self.state} -> {target} (expected {expected})")

    def advance(self, target):
        """Move to TARGET, which must be the next state of the pipeline."""
        self._check_transition(target)
        self.state = target

    def _guarded(self, action, *args):
        try:
            return action(*args)
        except BenchmarkError:
            self.state = ABORTED
            raise

    def _step(self, target, message, action, *args):
        self._check_transition(target)
        if message:
            self._emit(message)
        value = self._guarded(action, *args)
        self.advance(target)
        return value

    def create_schema(self):
        self._step(SCHEMA_CREATED, "Create the database.", build_schema, self.store, self.variants)

    def populate_bases(self):
        self._step(BASES_POPULATED, "Populate the Base tables.", populate_bases, self.store, self.count, self.variants)

    def populate_dependents(self):
        """Populate the Dep tables, then check every table's row count."""
        return self._step(DEPENDENTS_POPULATED, "Populate the Dep tables.", self._populate_and_verify)

    def _populate_and_verify(self):
        inserted = populate_dependents(self.store, self.count, self.variants)
        self.results.table_counts = assert_population_consistent(
            self.store, self.variants, self.count, len(block_starts(self.count))
        )
        return inserted

    def report_counts(self):
        """Print the row count of every Base / Dep pair."""
        counts = {}
        for variant in self.variants:
            base_count = self._guarded(self.store.table_count, variant.base_table)
            dep_count = self._guarded(self.store.table_count, variant.dep_table)
            counts[variant.base_table] = base_count
            counts[variant.dep_table] = dep_count
            self._emit(format_count_line(variant, base_count, dep_count))
        return counts

    def dump_canary(self):
        """Print the rows of the canary Dep table."""
        rows = self._guarded(self.store.fetch_all, f"SELECT * FROM {canary_table(self.variants)};")
        self._emit(format_dump(rows))

    def delete_next(self):
        """Time the DELETE on the next Base table in variant order."""
        done = len(self.results.results)
        if done >= len(self.variants):
            raise RuntimeError(f"Every DELETE has already run (state {self.state})")
        variant = self.variants[done]
        message = "Do the deletions." if done == 0 else None
        result = self._step(
            deleted_state(variant), message, timed_delete, self.store, variant.base_table, variant.fk_column_count
        )
        self.results.add_result(result)
        self._emit(format_delete_line(result))
        return result

    def finish(self):
        self.advance(DONE)

    def run(self, dump=False):
        """Drive every phase in order.

        Returns:
            BenchmarkResults with one entry per variant
        """
        self.create_schema()
        self.populate_bases()
        self.populate_dependents()
        if dump:
            self.dump_canary()
        self.report_counts()
        for _ in self.variants:
            self.delete_next()
        self.finish()
        return self.results


def run_benchmark(database_path, count, json_path=None, dump=False, out=None):
    """
    Recreate the store at DATABASE_PATH and run the whole benchmark.

    Args:
        database_path: SQLite file, removed first if it exists
        count: Rows per Base table
        json_path: Optional path for the JSON results export
        dump: Print the canary Dep table after population
        out: Stream for progress lines (default: sys.stdout)

    Returns:
        BenchmarkResults
    """
    with open_store(database_path, remove_existing=True) as store:
        results = DeleteBenchmarkRun(store, count, out=out).run(dump=dump)

    if json_path:
        results.save_json(json_path)
        print(f"\n✅ Benchmark results written to: {json_path}", file=out if out is not None else sys.stdout)
    return results


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Time DELETE FROM tables referenced by 0, 1 and 10 REFERENCES constraints",
        epilog="Store path and row count come from REFBENCH_DATABASE_PATH and REFBENCH_COUNT.",
    )
    parser.add_argument(
        "--json",
        type=Path,
        default=None,
        help="Write results (with hardware info) to this JSON file"
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the Dep0 rows after population"
    )
    args = parser.parse_args(argv)

    try:
        database_path = get_default_database_path()
        count = get_default_count()
    except ValueError as e:
        parser.error(str(e))

    try:
        run_benchmark(database_path, count, json_path=args.json, dump=args.dump)
    except BenchmarkError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
