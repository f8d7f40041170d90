"""
test_cli.py - Tests for the sql-wrapper command line.
"""

import logging
import os

import pytest
from typer.testing import CliRunner

from sql_wrapper import Schema
from sql_wrapper.cli.main import app

from models import Person, Reference, Season

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI callback reconfigures the root logger."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def populated_db(store, manager, db_path):
    people = Schema(store, Person, manager)
    references = Schema(store, Reference, manager)
    luke = Person(Name="Luke", Age=30, Weather=Season.WINTER)
    people.insert(luke)
    references.insert(Reference(OneToOne=luke, OneToMany=[luke]))
    return db_path


class TestDdlCommand:
    def test_prints_create_statements(self):
        result = runner.invoke(app, ["ddl", "models:Reference", "--path", TESTS_DIR])

        assert result.exit_code == 0
        assert 'CREATE TABLE IF NOT EXISTS "Reference"(' in result.output
        assert 'CREATE TABLE IF NOT EXISTS "ReferencePerson"(' in result.output
        assert result.output.index('"Reference"(') < result.output.index('"ReferencePerson"(')

    def test_bad_target(self):
        result = runner.invoke(app, ["ddl", "models"])

        assert result.exit_code != 0

    def test_invalid_record_type(self):
        result = runner.invoke(app, ["ddl", "models:Season", "--path", TESTS_DIR])

        assert result.exit_code == 1
        assert "must be a dataclass" in result.output


class TestTablesCommand:
    def test_lists_tables_with_counts(self, populated_db):
        result = runner.invoke(app, ["tables", populated_db])

        assert result.exit_code == 0
        assert "Person" in result.output
        assert "ReferencePerson" in result.output

    def test_db_path_from_environment(self, populated_db):
        result = runner.invoke(app, ["tables"], env={"SQL_WRAPPER_DB_PATH": populated_db})

        assert result.exit_code == 0
        assert "Reference" in result.output


class TestDumpCommand:
    def test_prints_rows(self, populated_db):
        result = runner.invoke(app, ["dump", populated_db, "Person"])

        assert result.exit_code == 0
        assert "Luke" in result.output
        assert "Winter" in result.output

    def test_null_values(self, populated_db):
        result = runner.invoke(app, ["dump", populated_db, "Reference"])

        assert result.exit_code == 0
        assert "NULL" in result.output

    def test_missing_table(self, populated_db):
        result = runner.invoke(app, ["dump", populated_db, "Missing"])

        assert result.exit_code == 1
        assert "not found" in result.output
