"""
Integrity checks for benchmark population.

A timing comparison between the three variants is only valid when the
tables hold exactly the rows population intended. These helpers raise
PopulationIntegrityViolation when they don't.
"""
from .errors import PopulationIntegrityViolation
from .schema import DEPENDENT_COLUMNS

DELETE_MODULUS = 11


def check_count_increment(store, table_name, before):
    """Confirm TABLE_NAME gained exactly one row since BEFORE was read.

    Args:
        store: Open Store
        table_name: Table that was just inserted into
        before: COUNT(*) read just before the insert

    Returns:
        The new row count

    Raises:
        PopulationIntegrityViolation: If the count is not before + 1
    """
    after = store.table_count(table_name)
    if after != before + 1:
        raise PopulationIntegrityViolation(table_name, before + 1, after)
    return after


def assert_population_consistent(store, variants, base_rows, dep_rows):
    """Check every Base and Dep table holds the expected number of rows.

    Args:
        store: Open Store
        variants: SchemaVariant records that were populated
        base_rows: Rows expected in each Base table
        dep_rows: Rows expected in each Dep table

    Returns:
        Dict of table name -> row count

    Raises:
        PopulationIntegrityViolation: On the first table whose count is off
    """
    counts = {}
    for variant in variants:
        for table_name, expected in ((variant.base_table, base_rows), (variant.dep_table, dep_rows)):
            actual = store.table_count(table_name)
            if actual != expected:
                raise PopulationIntegrityViolation(
                    table_name, expected, actual, "Population left the table with the wrong row count."
                )
            counts[table_name] = actual
    return counts


def find_references_to_deleted(store, variant):
    """(dep_id, base_id) pairs where a Dep row points at a row the delete removes.

    Every Dep column is checked, constrained or not. An empty list means
    the delete cannot violate a REFERENCES constraint.
    """
    selects = " UNION ALL ".join(
        f"SELECT dep_id, {column} AS base_id FROM {variant.dep_table} WHERE {column} % {DELETE_MODULUS} = 0"
        for column in DEPENDENT_COLUMNS
    )
    rows = store.fetch_all(f"{selects} ORDER BY dep_id, base_id;")
    return [(row["dep_id"], row["base_id"]) for row in rows]
