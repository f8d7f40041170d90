"""
statements.py - Relation-aware SQL statement synthesis.

Each builder walks a FieldPlan once and returns an ordered list of
statements. The order encodes referential-integrity dependencies:

- create: owning table first, then junction tables (they reference it)
- insert: owning row first, then junction rows (they reference it)
- update: owning row first, then delete-all + re-insert per junction
- delete: junction rows first, owning row last

Foreign records are turned into identities through a resolver
(normally the SchemaManager) before any statement is returned, so a
resolution failure aborts the operation before the store is touched.

Table and column names are always double-quoted.
"""

from typing import Any, Protocol

from sql_wrapper.config import (
    FOREIGN_DEFINITION,
    ID_COLUMN,
    ID_DEFINITION,
    ON_UPDATE,
)
from sql_wrapper.fields import ColumnSpec, FieldPlan
from sql_wrapper.relation import Relation
from sql_wrapper.sql.literals import NULL, quote_identifier, to_literal

_ID = quote_identifier(ID_COLUMN)


class IdentityResolver(Protocol):
    """Turns a record owned by another table into its identity."""

    def identity_of(self, table_name: str, record: Any) -> int: ...


def select_sql(plan: FieldPlan) -> str:
    """Statement selecting every row of the owning table."""
    return f"SELECT * FROM {quote_identifier(plan.table)} ORDER BY {_ID};"


def read_sql(plan: FieldPlan) -> str:
    """Statement selecting the identity and owning-table columns, in plan order."""
    names = [_ID] + [quote_identifier(spec.name) for spec in plan.value_columns]
    return f"SELECT {', '.join(names)} FROM {quote_identifier(plan.table)} ORDER BY {_ID};"


def junction_read_sql(plan: FieldPlan, spec: ColumnSpec) -> str:
    """Statement selecting a junction table's pairs in insertion order."""
    return (
        f"SELECT {quote_identifier(plan.owner_column)}, {quote_identifier(spec.name)} "
        f"FROM {quote_identifier(plan.junction_table(spec))} ORDER BY rowid;"
    )


def create_table_sql(plan: FieldPlan) -> list[str]:
    """
    Statements creating the owning table and its junction tables.

    Returns:
        Owning table statement first, then one statement per
        one-to-many / many-to-many field
    """
    statements = []
    clauses = [f"{_ID} {ID_DEFINITION}"]
    constraints = []

    for spec in plan.columns:
        name = quote_identifier(spec.name)
        if spec.relation is Relation.NONE:
            clauses.append(f"{name} {spec.definition}")
        elif spec.relation.is_reference:
            clause = f"{name} {spec.definition or FOREIGN_DEFINITION}"
            if spec.relation is Relation.ONE_TO_ONE:
                clause += " UNIQUE"
            clauses.append(clause)
            constraints.append(_foreign_key(spec.name, spec.referenced_table, spec.on_delete))
        else:
            statements.append(_create_junction_sql(plan, spec))

    # Junction tables reference the owning table, so it goes first
    statements.insert(
        0,
        f"CREATE TABLE IF NOT EXISTS {quote_identifier(plan.table)}"
        f"({', '.join(clauses + constraints)});",
    )
    return statements


def insert_sql(
    plan: FieldPlan, identity: int, record: Any, resolver: IdentityResolver
) -> list[str]:
    """
    Statements inserting a record under the given identity.

    Returns:
        The owning row insert followed by one junction insert per
        element of every collection field
    """
    statements = []
    names = [_ID]
    values = [to_literal(identity)]

    for spec in plan.columns:
        if spec.relation.is_collection:
            statements.extend(_junction_inserts(plan, spec, identity, record, resolver))
        else:
            names.append(quote_identifier(spec.name))
            values.append(_column_value(spec, record, resolver))

    statements.insert(
        0,
        f"INSERT INTO {quote_identifier(plan.table)} ({', '.join(names)}) "
        f"VALUES ({', '.join(values)});",
    )
    return statements


def update_sql(
    plan: FieldPlan, identity: int, record: Any, resolver: IdentityResolver
) -> list[str]:
    """
    Statements bringing the stored row of a record up to date.

    Collection fields are fully replaced: all junction rows of the owner
    are deleted and the current elements re-inserted. A plan with no
    owning-table columns emits no UPDATE statement.
    """
    assignments = [
        f"{quote_identifier(spec.name)} = {_column_value(spec, record, resolver)}"
        for spec in plan.value_columns
    ]

    statements = []
    if assignments:
        statements.append(
            f"UPDATE {quote_identifier(plan.table)} SET {', '.join(assignments)} "
            f"WHERE {_ID} = {to_literal(identity)};"
        )

    for spec in plan.collection_columns:
        statements.append(_junction_delete(plan, spec, identity))
        statements.extend(_junction_inserts(plan, spec, identity, record, resolver))

    return statements


def delete_sql(plan: FieldPlan, identity: int) -> list[str]:
    """Statements removing a record's junction rows, then its row."""
    statements = [_junction_delete(plan, spec, identity) for spec in plan.collection_columns]
    statements.append(
        f"DELETE FROM {quote_identifier(plan.table)} WHERE {_ID} = {to_literal(identity)};"
    )
    return statements


def _foreign_key(column: str, referenced_table: str, on_delete: str) -> str:
    return (
        f"FOREIGN KEY ({quote_identifier(column)}) "
        f"REFERENCES {quote_identifier(referenced_table)}({_ID}) "
        f"ON DELETE {on_delete} ON UPDATE {ON_UPDATE}"
    )


def _create_junction_sql(plan: FieldPlan, spec: ColumnSpec) -> str:
    owner = quote_identifier(plan.owner_column)
    name = quote_identifier(spec.name)
    referenced = f"{name} {FOREIGN_DEFINITION} NOT NULL"
    if spec.relation is Relation.ONE_TO_MANY:
        # An element belongs to at most one owner
        referenced += " UNIQUE"

    clauses = [
        f"{owner} {FOREIGN_DEFINITION} NOT NULL",
        referenced,
        _foreign_key(plan.owner_column, plan.table, "CASCADE"),
        _foreign_key(spec.name, spec.referenced_table, spec.on_delete),
    ]
    if spec.relation is Relation.MANY_TO_MANY:
        clauses.append(f"UNIQUE({owner}, {name})")

    return (
        f"CREATE TABLE IF NOT EXISTS {quote_identifier(plan.junction_table(spec))}"
        f"({', '.join(clauses)});"
    )


def _column_value(spec: ColumnSpec, record: Any, resolver: IdentityResolver) -> str:
    value = getattr(record, spec.attr)
    if spec.relation.is_reference:
        if value is None:
            return NULL
        return to_literal(resolver.identity_of(spec.referenced_table, value))
    return to_literal(value)


def _junction_inserts(
    plan: FieldPlan,
    spec: ColumnSpec,
    identity: int,
    record: Any,
    resolver: IdentityResolver,
) -> list[str]:
    elements = getattr(record, spec.attr) or ()
    table = quote_identifier(plan.junction_table(spec))
    columns = f"{quote_identifier(plan.owner_column)}, {quote_identifier(spec.name)}"
    return [
        f"INSERT INTO {table} ({columns}) VALUES "
        f"({to_literal(identity)}, {to_literal(resolver.identity_of(spec.referenced_table, element))});"
        for element in elements
    ]


def _junction_delete(plan: FieldPlan, spec: ColumnSpec, identity: int) -> str:
    return (
        f"DELETE FROM {quote_identifier(plan.junction_table(spec))} "
        f"WHERE {quote_identifier(plan.owner_column)} = {to_literal(identity)};"
    )
