"""
Result formatting and reporting utilities for benchmark results.

Renders the progress and timing lines of a run, dumps Dep rows for
debugging, and exports a JSON record with hardware information.
"""
import json
import platform
from datetime import datetime
from typing import Any, Dict, List, Optional

import psutil


class BenchmarkResult:
    """Container for one timed DELETE."""

    def __init__(self, table_name: str, elapsed_seconds: int,
                 precise_seconds: Optional[float] = None,
                 rows_before: Optional[int] = None,
                 rows_after: Optional[int] = None,
                 fk_column_count: Optional[int] = None):
        self.table_name = table_name
        self.elapsed_seconds = elapsed_seconds
        self.precise_seconds = precise_seconds
        self.rows_before = rows_before
        self.rows_after = rows_after
        self.fk_column_count = fk_column_count

    @property
    def rows_deleted(self) -> Optional[int]:
        if self.rows_before is None or self.rows_after is None:
            return None
        return self.rows_before - self.rows_after

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'table': self.table_name,
            'fk_columns': self.fk_column_count,
            'seconds': self.elapsed_seconds,
            'precise_seconds': self.precise_seconds,
            'rows_before': self.rows_before,
            'rows_after': self.rows_after,
            'rows_deleted': self.rows_deleted,
        }


class BenchmarkResults:
    """Collection of DELETE results for one run."""

    def __init__(self, row_count: int, database_path: str):
        self.timestamp = datetime.now().isoformat()
        self.hardware_info = self._get_hardware_info()
        self.row_count = row_count
        self.database_path = str(database_path)
        self.table_counts: Dict[str, int] = {}
        self.results: List[BenchmarkResult] = []

    def add_result(self, result: BenchmarkResult):
        """Add a benchmark result."""
        self.results.append(result)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'hardware': self.hardware_info,
            'row_count': self.row_count,
            'database': self.database_path,
            'table_counts': self.table_counts,
            'benchmarks': [r.to_dict() for r in self.results],
        }

    def to_json(self, indent: int = 2) -> str:
        """Export results to JSON format."""
        return json.dumps(self.to_dict(), indent=indent)

    def save_json(self, filepath: str):
        """Save results to JSON file."""
        with open(filepath, 'w') as f:
            f.write(self.to_json())

    def _get_hardware_info(self) -> Dict[str, str]:
        """Get basic hardware information."""
        return {
            'cpu': platform.processor() or platform.machine() or 'Unknown',
            'cpu_count': str(psutil.cpu_count(logical=False)),
            'memory_gb': str(round(psutil.virtual_memory().total / (1024**3), 1)),
            'os': f"{platform.system()} {platform.release()}",
            'python': platform.python_version(),
        }


def format_count_line(variant, base_count: int, dep_count: int) -> str:
    """Row counts of one Base / Dep pair after population."""
    return (
        f"There are {base_count} / {dep_count} rows in "
        f"{variant.base_table} / {variant.dep_table}."
    )


def format_delete_line(result: BenchmarkResult) -> str:
    """Timing line for one DELETE, table name right-aligned to 8."""
    return f"{result.table_name:>8}  {result.elapsed_seconds} seconds"


def format_dump(rows) -> str:
    """Tabular dump of Dep rows: dep_id and the first three columns."""
    lines = [
        "dep_id     A     B     C",
        "------  ----  ----  ----",
    ]
    for row in rows:
        lines.append(f"{row['dep_id']:6d}  {row['col_a']:4d}  {row['col_b']:4d}  {row['col_c']:4d}")
    return "\n".join(lines)
