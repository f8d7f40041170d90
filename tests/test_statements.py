"""
test_statements.py - Tests for SQL statement synthesis.

Statements are compared verbatim; order matters because it encodes
which rows must exist before others reference them.
"""

import datetime
from dataclasses import dataclass
from decimal import Decimal

import pytest

from sql_wrapper import column, extract_field_plan
from sql_wrapper.errors import SchemaError
from sql_wrapper.sql import (
    create_table_sql,
    delete_sql,
    insert_sql,
    quote_identifier,
    select_sql,
    to_literal,
    update_sql,
)
from sql_wrapper.sql.statements import junction_read_sql, read_sql

from models import Article, Person, Record, Reference, Season, Tag

FK_PERSON = 'REFERENCES "Person"("id") ON DELETE RESTRICT ON UPDATE CASCADE'


@dataclass
class Bag:
    Tags: list[Tag] = column(name="TagID", relation="many-to-many")


class TestLiterals:
    def test_scalars(self):
        assert to_literal(None) == "NULL"
        assert to_literal(20) == "20"
        assert to_literal(1.5) == "1.5"
        assert to_literal(True) == "1"
        assert to_literal(False) == "0"

    def test_strings_are_quoted(self):
        assert to_literal("Jack") == "'Jack'"
        assert to_literal("O'Brien") == "'O''Brien'"

    def test_enum_uses_value(self):
        assert to_literal(Season.SUMMER) == "'Summer'"

    def test_bytes_and_dates(self):
        assert to_literal(b"\x01\xff") == "X'01ff'"
        assert to_literal(datetime.date(2024, 1, 2)) == "'2024-01-02'"

    def test_decimal_keeps_scale(self):
        assert to_literal(Decimal("1.10")) == "'1.10'"

    def test_identifiers(self):
        assert quote_identifier("Order") == '"Order"'
        assert quote_identifier('a"b') == '"a""b"'

    def test_unsupported_values(self):
        with pytest.raises(SchemaError):
            to_literal(object())
        with pytest.raises(SchemaError):
            to_literal(float("nan"))


class TestPlainTable:
    plan = extract_field_plan(Record)

    def test_create(self):
        assert create_table_sql(self.plan) == [
            'CREATE TABLE IF NOT EXISTS "Record"("id" INTEGER PRIMARY KEY, '
            '"Name" VARCHAR(128), "Likes" INT, "Type" TEXT);'
        ]

    def test_insert(self, resolver):
        record = Record(Name="Jack", Likes=20, Type="Original")

        assert insert_sql(self.plan, 1, record, resolver) == [
            'INSERT INTO "Record" ("id", "Name", "Likes", "Type") '
            "VALUES (1, 'Jack', 20, 'Original');"
        ]

    def test_update(self, resolver):
        record = Record(Name="John", Likes=20, Type="Original")

        assert update_sql(self.plan, 1, record, resolver) == [
            """UPDATE "Record" SET "Name" = 'John', "Likes" = 20, "Type" = 'Original' """
            """WHERE "id" = 1;"""
        ]

    def test_delete(self):
        assert delete_sql(self.plan, 1) == ['DELETE FROM "Record" WHERE "id" = 1;']

    def test_selects(self):
        assert select_sql(self.plan) == 'SELECT * FROM "Record" ORDER BY "id";'
        assert read_sql(self.plan) == (
            'SELECT "id", "Name", "Likes", "Type" FROM "Record" ORDER BY "id";'
        )


class TestRelationTable:
    plan = extract_field_plan(Reference)

    def setup_method(self):
        self.first = Person(Name="Luke", Age=30, Weather=Season.WINTER)
        self.second = Person(Name="John", Age=10, Weather=Season.SUMMER)

    def _resolver(self, resolver):
        resolver.add(self.first, 5)
        resolver.add(self.second, 6)
        return resolver

    def test_create_puts_owning_table_first(self):
        statements = create_table_sql(self.plan)

        assert statements == [
            'CREATE TABLE IF NOT EXISTS "Reference"("id" INTEGER PRIMARY KEY, '
            '"OneToOneID" INTEGER UNIQUE, "ManyToOneID" INTEGER, '
            f'FOREIGN KEY ("OneToOneID") {FK_PERSON}, '
            f'FOREIGN KEY ("ManyToOneID") {FK_PERSON});',
            'CREATE TABLE IF NOT EXISTS "ReferencePerson"('
            '"ReferenceID" INTEGER NOT NULL, "OneToManyID" INTEGER NOT NULL UNIQUE, '
            'FOREIGN KEY ("ReferenceID") REFERENCES "Reference"("id") '
            'ON DELETE CASCADE ON UPDATE CASCADE, '
            f'FOREIGN KEY ("OneToManyID") {FK_PERSON});',
        ]

    def test_many_to_many_junction(self):
        statements = create_table_sql(extract_field_plan(Article))

        assert len(statements) == 2
        assert statements[0].startswith('CREATE TABLE IF NOT EXISTS "Article"(')
        assert statements[1] == (
            'CREATE TABLE IF NOT EXISTS "ArticleTag"('
            '"ArticleID" INTEGER NOT NULL, "TagID" INTEGER NOT NULL, '
            'FOREIGN KEY ("ArticleID") REFERENCES "Article"("id") '
            'ON DELETE CASCADE ON UPDATE CASCADE, '
            'FOREIGN KEY ("TagID") REFERENCES "Tag"("id") '
            'ON DELETE RESTRICT ON UPDATE CASCADE, '
            'UNIQUE("ArticleID", "TagID"));'
        )

    def test_insert_owning_row_first(self, resolver):
        ref = Reference(OneToOne=self.first, OneToMany=[self.first, self.second])

        statements = insert_sql(self.plan, 1, ref, self._resolver(resolver))

        assert statements == [
            'INSERT INTO "Reference" ("id", "OneToOneID", "ManyToOneID") VALUES (1, 5, NULL);',
            'INSERT INTO "ReferencePerson" ("ReferenceID", "OneToManyID") VALUES (1, 5);',
            'INSERT INTO "ReferencePerson" ("ReferenceID", "OneToManyID") VALUES (1, 6);',
        ]

    @pytest.mark.parametrize("count", [0, 1, 2])
    def test_insert_statement_count(self, resolver, count):
        elements = [self.first, self.second][:count]
        ref = Reference(OneToMany=elements)

        statements = insert_sql(self.plan, 3, ref, self._resolver(resolver))

        assert len(statements) == count + 1
        assert statements[0].startswith('INSERT INTO "Reference" ')

    def test_update_replaces_junction_rows(self, resolver):
        ref = Reference(OneToOne=self.first, OneToMany=[self.second])

        statements = update_sql(self.plan, 1, ref, self._resolver(resolver))

        assert statements == [
            'UPDATE "Reference" SET "OneToOneID" = 5, "ManyToOneID" = NULL WHERE "id" = 1;',
            'DELETE FROM "ReferencePerson" WHERE "ReferenceID" = 1;',
            'INSERT INTO "ReferencePerson" ("ReferenceID", "OneToManyID") VALUES (1, 6);',
        ]

    def test_update_statement_count(self, resolver):
        ref = Reference(OneToMany=[self.first, self.second])

        statements = update_sql(self.plan, 1, ref, self._resolver(resolver))

        # 1 owning update + 1 junction delete + 2 junction inserts
        assert len(statements) == 4

    def test_delete_junction_rows_first(self):
        assert delete_sql(self.plan, 1) == [
            'DELETE FROM "ReferencePerson" WHERE "ReferenceID" = 1;',
            'DELETE FROM "Reference" WHERE "id" = 1;',
        ]

    def test_unresolved_reference_aborts(self, resolver):
        ref = Reference(OneToOne=self.first)

        with pytest.raises(KeyError):
            insert_sql(self.plan, 1, ref, resolver)

    def test_junction_read(self):
        spec = self.plan.collection_columns[0]

        assert junction_read_sql(self.plan, spec) == (
            'SELECT "ReferenceID", "OneToManyID" FROM "ReferencePerson" ORDER BY rowid;'
        )


class TestCollectionOnlyTable:
    def test_update_without_owning_columns(self, resolver):
        plan = extract_field_plan(Bag)
        tag = Tag(Label="red")
        resolver.add(tag, 2)

        statements = update_sql(plan, 1, Bag(Tags=[tag]), resolver)

        # 1 + K rather than 1 + 1 + K: an UPDATE with an empty SET list
        # is not valid SQL, so none is emitted
        assert statements == [
            'DELETE FROM "BagTag" WHERE "BagID" = 1;',
            'INSERT INTO "BagTag" ("BagID", "TagID") VALUES (1, 2);',
        ]

    def test_create_with_identity_only(self):
        statements = create_table_sql(extract_field_plan(Bag))

        assert statements[0] == 'CREATE TABLE IF NOT EXISTS "Bag"("id" INTEGER PRIMARY KEY);'
