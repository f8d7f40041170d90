"""
conftest.py - pytest fixtures for sql_wrapper tests.
"""

import os
import tempfile
import pytest

from sql_wrapper import SchemaManager, SQLiteStore


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test databases."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def db_path(temp_dir):
    return os.path.join(temp_dir, "test.db")


@pytest.fixture
def store(db_path):
    """A SQLiteStore on a fresh database file."""
    store = SQLiteStore(db_path)
    yield store
    store.close()


@pytest.fixture
def manager():
    return SchemaManager()


class StubResolver:
    """Resolver answering from a fixed {id(record): identity} mapping."""

    def __init__(self, identities=None):
        self.identities = dict(identities or {})

    def add(self, record, identity):
        self.identities[id(record)] = identity

    def identity_of(self, table_name, record):
        return self.identities[id(record)]


@pytest.fixture
def resolver():
    return StubResolver()
