import platform

import psutil
import pytest

from refbench.database_setup import create_memory_store


# pytest-benchmark configuration
def pytest_configure(config):
    """Configure pytest-benchmark for consistent measurements"""
    config.option.benchmark_min_rounds = 3
    config.option.benchmark_warmup = False  # every round needs freshly populated tables
    config.option.benchmark_disable_gc = True  # Disable GC during timing


@pytest.fixture(scope="session")
def hardware_metadata():
    """Collect hardware and environment metadata"""
    return {
        "cpu": platform.processor() or platform.machine(),
        "cpu_count": psutil.cpu_count(logical=False),
        "memory_gb": round(psutil.virtual_memory().total / (1024**3), 2),
        "os": f"{platform.system()} {platform.release()}",
        "python_version": platform.python_version(),
    }


@pytest.fixture
def store_factory():
    """Create in-memory stores on demand, closing all of them afterwards"""
    stores = []

    def make():
        store = create_memory_store()
        stores.append(store)
        return store

    yield make
    for store in stores:
        store.close()
