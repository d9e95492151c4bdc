import pytest

from refbench.data_generator import populate_bases, populate_dependents
from refbench.database_setup import create_memory_store
from refbench.schema import build_schema

SMALL_COUNT = 22


@pytest.fixture
def memory_store():
    """Create an in-memory store"""
    store = create_memory_store()
    yield store
    store.close()


@pytest.fixture
def schema_store(memory_store):
    """In-memory store with all six tables created"""
    build_schema(memory_store)
    return memory_store


@pytest.fixture
def populated_store(schema_store, request):
    """Store with Base and Dep tables populated

    Usage: @pytest.mark.parametrize("populated_store", [33], indirect=True)
    """
    count = getattr(request, 'param', SMALL_COUNT)
    populate_bases(schema_store, count)
    populate_dependents(schema_store, count)
    return schema_store, count
