"""
Data generation for the REFERENCES DELETE benchmark.

Fills the Base tables identically, then fills the Dep tables
identically except for which Base table they point at. Dep rows refer
to ten consecutive Base ids and then skip one, so every id divisible by
11 is never referenced and can later be deleted without violating a
constraint.
"""
from .assertion_helpers import check_count_increment
from .database_setup import INTEGER, TEXT
from .schema import DEFAULT_VARIANTS, DEPENDENT_COLUMNS

BASE_VALUE_OFFSET = 1000
BLOCK_SIZE = 11
REFERENCES_PER_BLOCK = BLOCK_SIZE - 1


def base_row_values(i):
    """(val_a, val_b) for the i-th Base row, 1-indexed."""
    val_a = BASE_VALUE_OFFSET + i
    return val_a, str(val_a)


def block_starts(count):
    """Block start ids 1, 12, 23, ... whose ten references fit within COUNT."""
    return range(1, count - REFERENCES_PER_BLOCK + 1, BLOCK_SIZE)


def dependent_row_values(start):
    """The ten column values of the Dep row for the block starting at START."""
    return tuple(start + offset for offset in range(REFERENCES_PER_BLOCK))


def base_insert_sql(variant):
    prefix = f"base{variant.tag}"
    return (
        f"INSERT INTO {variant.base_table} (val_a, val_b) "
        f"VALUES (:{prefix}_a, :{prefix}_b);"
    )


def dependent_insert_sql(variant):
    prefix = f"dep{variant.tag}"
    columns = ", ".join(DEPENDENT_COLUMNS)
    params = ", ".join(f":{prefix}_{column[-1]}" for column in DEPENDENT_COLUMNS)
    return f"INSERT INTO {variant.dep_table} ({columns}) VALUES ({params});"


def _prepare_all(store, sql_for, variants):
    """Prepare one statement per variant, closing any already prepared on failure."""
    statements = []
    try:
        for variant in variants:
            statements.append((variant, store.prepare(sql_for(variant))))
    except Exception:
        _close_all(statements)
        raise
    return statements


def _close_all(statements):
    for _, statement in statements:
        statement.close()


def populate_bases(store, count, variants=DEFAULT_VARIANTS):
    """Insert COUNT rows into every Base table inside one transaction.

    Row i gets val_a = 1000 + i and val_b = str(val_a) in every table, so
    base_id i holds the same values everywhere.
    """
    statements = _prepare_all(store, base_insert_sql, variants)
    try:
        with store.transaction():
            for i in range(1, count + 1):
                val_a, val_b = base_row_values(i)
                for variant, statement in statements:
                    prefix = f":base{variant.tag}"
                    store.bind_value(statement, f"{prefix}_a", val_a, INTEGER)
                    store.bind_value(statement, f"{prefix}_b", val_b, TEXT)
                    store.execute(statement)
    finally:
        _close_all(statements)


def canary_table(variants=DEFAULT_VARIANTS):
    """The Dep table whose count is checked after every insert.

    This is the unconstrained variant's table when there is one.
    """
    for variant in variants:
        if variant.fk_column_count == 0:
            return variant.dep_table
    return variants[0].dep_table


def populate_dependents(store, count, variants=DEFAULT_VARIANTS, verify_table=None):
    """Insert one Dep row per block into every Dep table.

    Each block gets its own transaction. The canary table's count must
    grow by exactly one per insert or PopulationIntegrityViolation is
    raised and the block is rolled back.

    Args:
        store: Open Store with the schema built and Base tables populated
        count: Number of rows in each Base table
        variants: SchemaVariant records to populate
        verify_table: Dep table to check, defaults to canary_table(variants)

    Returns:
        Number of rows inserted into each Dep table

    Raises:
        ValueError: If verify_table is not the Dep table of one of VARIANTS
    """
    verify_table = verify_table or canary_table(variants)
    if verify_table not in [variant.dep_table for variant in variants]:
        raise ValueError(f"{verify_table} is not a Dep table of the variants being populated")
    statements = _prepare_all(store, dependent_insert_sql, variants)
    inserted = 0
    try:
        for start in block_starts(count):
            values = dependent_row_values(start)
            with store.transaction():
                for variant, statement in statements:
                    checked = variant.dep_table == verify_table
                    if checked:
                        before = store.table_count(verify_table)
                    for column, value in zip(DEPENDENT_COLUMNS, values):
                        store.bind_value(statement, f":dep{variant.tag}_{column[-1]}", value, INTEGER)
                    store.execute(statement)
                    if checked:
                        check_count_increment(store, verify_table, before)
            inserted += 1
    finally:
        _close_all(statements)
    return inserted
