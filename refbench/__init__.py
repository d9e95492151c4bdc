"""
refbench: how much do REFERENCES constraints slow down DELETE FROM in SQLite?

Builds Base/Dep table pairs with 0, 1 and 10 REFERENCES constraints,
fills them so every 11th Base row is unreferenced, and times one bulk
DELETE of those rows per Base table.
"""
from .benchmark_scenarios import run_delete_benchmarks, timed_delete
from .data_generator import populate_bases, populate_dependents
from .database_setup import Store, open_store
from .errors import (
    BenchmarkError,
    BindError,
    ExecError,
    ExecuteError,
    OpenError,
    PopulationIntegrityViolation,
    PrepareError,
    UnexpectedConstraintViolation,
)
from .run_delete_benchmark import DeleteBenchmarkRun, run_benchmark
from .schema import DEFAULT_VARIANTS, SchemaVariant, build_schema

__version__ = "0.1.0"
