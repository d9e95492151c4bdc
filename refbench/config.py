"""
Shared configuration for the REFERENCES DELETE benchmark.

The two tunables of a run are process-wide settings taken from the
environment, so every entry point (CLI, pytest suites) sees the same
values:

    REFBENCH_DATABASE_PATH: SQLite file to (re)create (default: db1.sqlite3)
    REFBENCH_COUNT: Rows inserted into each Base table (default: 200000)
"""

import os
from pathlib import Path

DATABASE_PATH_ENV = "REFBENCH_DATABASE_PATH"
COUNT_ENV = "REFBENCH_COUNT"

DEFAULT_DATABASE_PATH = "db1.sqlite3"
DEFAULT_COUNT = 200000


def get_default_database_path() -> Path:
    """
    Get the path of the store the benchmark recreates on every run.

    Returns:
        Path from REFBENCH_DATABASE_PATH, or db1.sqlite3 in the current directory
    """
    return Path(os.environ.get(DATABASE_PATH_ENV) or DEFAULT_DATABASE_PATH)


def get_default_count() -> int:
    """
    Get the number of rows inserted into each Base table.

    Returns:
        Positive integer from REFBENCH_COUNT, or 200000

    Raises:
        ValueError: If REFBENCH_COUNT is not a positive integer
    """
    raw = os.environ.get(COUNT_ENV)
    if not raw:
        return DEFAULT_COUNT
    try:
        count = int(raw)
    except ValueError:
        raise ValueError(f"{COUNT_ENV} must be a positive integer, got {raw!r}") from None
    if count < 1:
        raise ValueError(f"{COUNT_ENV} must be a positive integer, got {count}")
    return count
