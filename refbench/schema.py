"""
Schema setup for the REFERENCES DELETE benchmark.

Creates three independent (Base, Dep) table pairs that differ only in
how many Dep columns carry a REFERENCES constraint:

- Base0 / Dep0: no REFERENCES constraint (the relationship is implicit)
- Base1 / Dep1: col_a references Base1(base_id)
- Base10 / Dep10: all ten columns reference Base10(base_id)

Each variant is described by data (SchemaVariant) and rendered by the
same routine, so all three emit the same SQL shape.
"""
import string

# col_a .. col_j
DEPENDENT_COLUMNS = [f"col_{letter}" for letter in string.ascii_lowercase[:10]]


class SchemaVariant:
    """One (Base, Dep) table pair and its REFERENCES fan-out."""

    def __init__(self, tag: int, fk_column_count: int):
        if not 0 <= fk_column_count <= len(DEPENDENT_COLUMNS):
            raise ValueError(
                f"fk_column_count must be between 0 and {len(DEPENDENT_COLUMNS)}, got {fk_column_count}"
            )
        self.tag = tag
        self.fk_column_count = fk_column_count

    @property
    def base_table(self) -> str:
        return f"Base{self.tag}"

    @property
    def dep_table(self) -> str:
        return f"Dep{self.tag}"

    def __eq__(self, other):
        if not isinstance(other, SchemaVariant):
            return NotImplemented
        return (self.tag, self.fk_column_count) == (other.tag, other.fk_column_count)

    def __hash__(self):
        return hash((self.tag, self.fk_column_count))

    def __repr__(self):
        return f"SchemaVariant(tag={self.tag}, fk_column_count={self.fk_column_count})"


# Deletes are timed in this order
DEFAULT_VARIANTS = (
    SchemaVariant(0, 0),
    SchemaVariant(1, 1),
    SchemaVariant(10, 10),
)


def base_table_ddl(variant: SchemaVariant) -> str:
    """CREATE TABLE statement for a variant's Base table."""
    return (
        f"CREATE TABLE {variant.base_table} (\n"
        f"  base_id INTEGER PRIMARY KEY,\n"
        f"  val_a INTEGER,\n"
        f"  val_b TEXT\n"
        f");"
    )


def dependent_table_ddl(variant: SchemaVariant) -> str:
    """CREATE TABLE statement for a variant's Dep table.

    The first fk_column_count columns reference the variant's Base table.
    """
    columns = ["  dep_id INTEGER PRIMARY KEY"]
    for position, column in enumerate(DEPENDENT_COLUMNS):
        definition = f"  {column} INTEGER NOT NULL"
        if position < variant.fk_column_count:
            definition += f" REFERENCES {variant.base_table}(base_id)"
        columns.append(definition)
    body = ",\n".join(columns)
    return f"CREATE TABLE {variant.dep_table} (\n{body}\n);"


def schema_statements(variants=DEFAULT_VARIANTS):
    """All CREATE TABLE statements, Base then Dep for each variant."""
    statements = []
    for variant in variants:
        statements.append(base_table_ddl(variant))
        statements.append(dependent_table_ddl(variant))
    return statements


def create_tables(store, statements):
    """Run every CREATE statement inside one transaction.

    Either all tables exist afterwards or, if any statement is rejected,
    none of them do and the error propagates.
    """
    with store.transaction():
        for sql in statements:
            store.exec(sql)


def build_schema(store, variants=DEFAULT_VARIANTS):
    """Enable REFERENCES enforcement, then create every table atomically.

    Args:
        store: Open Store
        variants: SchemaVariant records to create
    """
    # Has no effect inside a transaction, so it must come first
    store.exec("PRAGMA foreign_keys = ON;")
    create_tables(store, schema_statements(variants))


def foreign_keys_enabled(store) -> bool:
    rows = store.fetch_all("PRAGMA foreign_keys;")
    return bool(rows and rows[0][0])


def list_tables(store):
    """Names of the user tables in the store, sorted."""
    rows = store.fetch_all(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name;"
    )
    return [row["name"] for row in rows]
