"""
test_manager.py - Tests for cross-schema resolution.
"""

import pytest

from sql_wrapper import Schema, SchemaManager
from sql_wrapper.errors import NotFoundError, NotTrackedError, UnknownTableError

from models import Record


class TestSchemaManager:
    def test_register_and_resolve(self, store, manager):
        records = Schema(store, Record, manager)
        record = Record(Name="Jack", Likes=20, Type="Original")
        identity = records.insert(record)

        assert manager.resolve("Record", identity) is record
        assert manager.identity_of("Record", record) == identity

    def test_unknown_table(self, manager):
        with pytest.raises(UnknownTableError) as exc_info:
            manager.resolve("Missing", 1)
        assert exc_info.value.table_name == "Missing"

        with pytest.raises(UnknownTableError):
            manager.identity_of("Missing", object())

    def test_unknown_identity(self, store, manager):
        Schema(store, Record, manager)

        with pytest.raises(NotFoundError):
            manager.resolve("Record", 7)

    def test_untracked_record(self, store, manager):
        Schema(store, Record, manager)

        with pytest.raises(NotTrackedError):
            manager.identity_of("Record", Record(Name="a", Likes=1, Type="x"))

    def test_register_overwrites(self, store, manager):
        first = Schema(store, Record, manager)
        second = Schema(store, Record, manager)

        assert manager.get_schema("Record") is second
        assert manager.get_schema("Record") is not first
        assert manager.tables() == ["Record"]
        assert len(manager) == 1

    def test_managers_are_independent(self, store):
        left, right = SchemaManager(), SchemaManager()
        Schema(store, Record, left)

        assert "Record" in left
        assert "Record" not in right
