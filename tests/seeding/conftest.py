"""
Seeding test fixtures — in-memory backends, host context, wired routines.
"""

import pytest

from tests.fakes import InMemoryStore, in_memory_backends


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def backends(store):
    return in_memory_backends(store)


@pytest.fixture
def seed_context(content_root):
    from seeding import SeedContext
    return SeedContext(content_root=content_root, environment_name="Test")


@pytest.fixture
def make_routine(backends):
    """
    Build a SeedRoutine over the in-memory backends.

    Usage:
        routine = make_routine(record_count=5)
    """
    from seeding import ConnectionResolver, ImportExecutor, RecordGenerator, SchemaEnsurer, SeedRoutine

    def _make(record_count: int = 3, seed: int = 1234, imported_by: str = "pytest"):
        return SeedRoutine(
            resolver=ConnectionResolver(),
            ensurer=SchemaEnsurer(backends),
            importer=ImportExecutor(imported_by=imported_by),
            generator=RecordGenerator(seed=seed),
            record_count=record_count,
        )

    return _make
