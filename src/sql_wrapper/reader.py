"""
reader.py - Default row materialization.

Rebuilds the records of one table from the store. Used by
Schema.read() for record types that do not define their own
`read_rows(store, resolver)` classmethod.

Foreign identities are resolved through the resolver, so the schemas
of referenced tables must have been read first. References into the
table being read are resolved against the rows being read.
"""

import dataclasses
import datetime
import decimal
import logging
from enum import Enum
from typing import Any, Protocol

from sql_wrapper.db.store import Store
from sql_wrapper.errors import NotFoundError, SchemaError
from sql_wrapper.fields import FieldPlan, element_type, type_hints
from sql_wrapper.sql.statements import junction_read_sql, read_sql

logger = logging.getLogger("sql_wrapper.reader")


class RecordResolver(Protocol):
    """Turns an identity in another table into the record it names."""

    def resolve(self, table_name: str, identity: int) -> Any: ...


def read_rows(plan: FieldPlan, store: Store, resolver: RecordResolver) -> dict[int, Any]:
    """
    Read every row of a table, with its relations, into records.

    Returns:
        Mapping of identity to a newly built record

    Raises:
        SchemaError: A field that is not stored has no default
        NotFoundError: A junction row names an owner missing from the table
        UnknownTableError / NotFoundError: A foreign identity cannot be resolved
    """
    hints = type_hints(plan.record_type)
    _check_constructible(plan)

    items: dict[int, Any] = {}
    # (identity, attr, foreign) for references into the table being read
    own_references: list[tuple[int, str, int]] = []

    for row in store.query(read_sql(plan)):
        identity, values = row[0], row[1:]
        stored: dict[str, Any] = {}
        for spec, value in zip(plan.value_columns, values):
            if not spec.relation.is_reference:
                stored[spec.attr] = _convert(hints.get(spec.attr), value)
            elif value is None:
                stored[spec.attr] = None
            elif spec.referenced_table == plan.table:
                stored[spec.attr] = None
                own_references.append((identity, spec.attr, value))
            else:
                stored[spec.attr] = resolver.resolve(spec.referenced_table, value)
        for spec in plan.collection_columns:
            stored[spec.attr] = []

        items[identity] = _build(plan.record_type, stored)

    def lookup(table_name: str, foreign: int) -> Any:
        if table_name == plan.table:
            try:
                return items[foreign]
            except KeyError:
                raise NotFoundError(table_name, foreign) from None
        return resolver.resolve(table_name, foreign)

    # Bypasses frozen dataclasses; the record is still being built
    for identity, attr, foreign in own_references:
        object.__setattr__(items[identity], attr, lookup(plan.table, foreign))

    for spec in plan.collection_columns:
        for owner, foreign in store.query(junction_read_sql(plan, spec)):
            if owner not in items:
                raise NotFoundError(plan.table, owner)
            getattr(items[owner], spec.attr).append(lookup(spec.referenced_table, foreign))

    logger.debug("Read %d rows from %s", len(items), plan.table)
    return items


def _check_constructible(plan: FieldPlan) -> None:
    stored = {spec.attr for spec in plan.columns}
    for f in dataclasses.fields(plan.record_type):
        if f.name in stored:
            continue
        if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            raise SchemaError(
                f"field '{f.name}' is not stored and has no default",
                record_type=plan.record_type.__name__,
            )


def _build(record_type: type, stored: dict[str, Any]) -> Any:
    init_names = {f.name for f in dataclasses.fields(record_type) if f.init}
    record = record_type(**{k: v for k, v in stored.items() if k in init_names})
    for name, value in stored.items():
        if name not in init_names:
            object.__setattr__(record, name, value)
    return record


def _convert(hint: Any, value: Any) -> Any:
    """Coerce a stored value back to the field's declared type where it differs."""
    if value is None or hint is None:
        return value
    target = element_type(hint)
    if not isinstance(target, type):
        return value
    if issubclass(target, Enum):
        return target(value)
    if target is bool:
        return bool(value)
    if issubclass(target, decimal.Decimal):
        return target(str(value))
    if issubclass(target, (datetime.date, datetime.time)) and isinstance(value, str):
        return target.fromisoformat(value)
    return value
