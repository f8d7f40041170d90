"""
fields.py - Field metadata extraction.

Record types are dataclasses whose fields carry string annotations
in their metadata:

    sql        column name override, or "-" to skip the field
    def        SQL type definition (required unless the field is a relation)
    rel        relation kind (one-to-one, many-to-one, one-to-many, many-to-many)
    references referenced table name or record class (optional, inferred
               from the type hint when absent)
    on_delete  delete action of the foreign key to the referenced table

A record type is introspected once and turned into an immutable FieldPlan.
"""

import dataclasses
import re
import typing
from dataclasses import dataclass
from typing import Any

from sql_wrapper.config import (
    DEFAULT_ON_DELETE,
    DEFINITION_KEY,
    ID_COLUMN,
    JUNCTION_OWNER_SUFFIX,
    NAME_KEY,
    ON_DELETE_KEY,
    REFERENCES_KEY,
    REFERENTIAL_ACTIONS,
    RELATION_KEY,
    SKIP_SENTINEL,
    TABLE_NAME_ATTRIBUTE,
)
from sql_wrapper.errors import InvalidFieldNameError, MissingDefinitionError, SchemaError
from sql_wrapper.relation import Relation, classify

# Names that wrap the referenced class in a string annotation
_WRAPPER_NAMES: typing.Final[frozenset[str]] = frozenset(
    {"Optional", "Union", "None", "list", "List", "set", "Set", "tuple", "Tuple",
     "Sequence", "Iterable", "typing", "collections", "abc"}
)
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def column(
    definition: str | None = None,
    name: str | None = None,
    *,
    relation: str | None = None,
    references: Any = None,
    on_delete: str | None = None,
    **kwargs: Any,
) -> Any:
    """
    Declare a persisted dataclass field.

    Reference relations default to None and collection relations to an
    empty list unless a default is given. Remaining keyword arguments go
    to dataclasses.field.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    if name is not None:
        metadata[NAME_KEY] = name
    if definition is not None:
        metadata[DEFINITION_KEY] = definition
    if relation is not None:
        metadata[RELATION_KEY] = relation
    if references is not None:
        metadata[REFERENCES_KEY] = references
    if on_delete is not None:
        metadata[ON_DELETE_KEY] = on_delete

    if "default" not in kwargs and "default_factory" not in kwargs:
        kind = classify(relation)
        if kind.is_collection:
            kwargs["default_factory"] = list
        elif kind.is_reference:
            kwargs["default"] = None

    return dataclasses.field(metadata=metadata, **kwargs)


def transient(**kwargs: Any) -> Any:
    """Declare a dataclass field that is never persisted."""
    return column(name=SKIP_SENTINEL, **kwargs)


def table_name_of(record_type: type) -> str:
    """Table name of a record type: __tablename__ or the class name."""
    return getattr(record_type, TABLE_NAME_ATTRIBUTE, None) or record_type.__name__


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    """One persisted field of a record type."""
    attr: str  # Python attribute name
    name: str  # Column name
    definition: str
    relation: Relation = Relation.NONE
    referenced_table: str | None = None
    on_delete: str = DEFAULT_ON_DELETE


@dataclass(frozen=True)
class FieldPlan:
    """
    Ordered, immutable column layout of one record type.

    Built by extract_field_plan() and consumed by the statement
    synthesizer and the default row reader.
    """
    record_type: type
    table: str
    columns: tuple[ColumnSpec, ...]

    @property
    def value_columns(self) -> tuple[ColumnSpec, ...]:
        """Columns stored on the owning table (plain and reference)."""
        return tuple(c for c in self.columns if not c.relation.is_collection)

    @property
    def collection_columns(self) -> tuple[ColumnSpec, ...]:
        return tuple(c for c in self.columns if c.relation.is_collection)

    @property
    def owner_column(self) -> str:
        """Name of the owner identity column in every junction table."""
        return f"{self.table}{JUNCTION_OWNER_SUFFIX}"

    def junction_table(self, spec: ColumnSpec) -> str:
        return f"{self.table}{spec.referenced_table}"


def extract_field_plan(record_type: type) -> FieldPlan:
    """
    Introspect a dataclass record type into a FieldPlan.

    Raises:
        SchemaError: record_type is not a dataclass, or a field has an
            unknown delete action
        MissingDefinitionError: a plain field has no definition, or a
            relation field's referenced table cannot be determined
        InvalidFieldNameError: a column name is empty, reserved or
            duplicated, or two fields share a junction table
    """
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise SchemaError(
            "record type must be a dataclass",
            record_type=getattr(record_type, "__name__", repr(record_type)),
        )

    table = table_name_of(record_type)
    hints = type_hints(record_type)

    columns: list[ColumnSpec] = []
    seen_names: set[str] = set()
    seen_junctions: set[str] = set()

    for f in dataclasses.fields(record_type):
        name = _get_name(f)
        if name == SKIP_SENTINEL:
            continue

        if name.lower() == ID_COLUMN:
            raise InvalidFieldNameError(
                f"column name '{name}' is reserved for the identity column", field=f.name
            )
        if name.lower() in seen_names:
            raise InvalidFieldNameError(f"column name '{name}' is used twice", field=f.name)
        seen_names.add(name.lower())

        relation = classify(f.metadata.get(RELATION_KEY))
        if relation is Relation.NONE:
            columns.append(ColumnSpec(attr=f.name, name=name, definition=_get_definition(f)))
            continue

        referenced = _referenced_table(f, hints.get(f.name, f.type))
        spec = ColumnSpec(
            attr=f.name,
            name=name,
            definition=f.metadata.get(DEFINITION_KEY, ""),
            relation=relation,
            referenced_table=referenced,
            on_delete=_get_on_delete(f),
        )

        if relation.is_collection:
            if name.lower() == f"{table}{JUNCTION_OWNER_SUFFIX}".lower():
                raise InvalidFieldNameError(
                    f"column name '{name}' clashes with the junction owner column",
                    field=f.name,
                )
            junction = f"{table}{referenced}"
            if junction in seen_junctions:
                raise InvalidFieldNameError(
                    f"junction table '{junction}' is already used by another field",
                    field=f.name,
                )
            seen_junctions.add(junction)

        columns.append(spec)

    return FieldPlan(record_type=record_type, table=table, columns=tuple(columns))


def _get_name(f: dataclasses.Field) -> str:
    """Column name of a field: the `sql` override or the field name."""
    name = f.metadata.get(NAME_KEY, f.name)
    if not name or not name.strip():
        raise InvalidFieldNameError(f"name ({name!r}) is invalid", field=f.name)
    return name.strip()


def _get_definition(f: dataclasses.Field) -> str:
    definition = f.metadata.get(DEFINITION_KEY)
    if not definition:
        raise MissingDefinitionError(
            f"tag '{DEFINITION_KEY}' is not present for field '{f.name}'", field=f.name
        )
    return definition


def _get_on_delete(f: dataclasses.Field) -> str:
    action = str(f.metadata.get(ON_DELETE_KEY, DEFAULT_ON_DELETE)).upper()
    if action not in REFERENTIAL_ACTIONS:
        raise SchemaError(f"unknown delete action {action!r} on field '{f.name}'")
    return action


def type_hints(record_type: type) -> dict[str, Any]:
    # Forward references to classes defined later stay as strings
    try:
        return typing.get_type_hints(record_type)
    except (NameError, TypeError):
        return {f.name: f.type for f in dataclasses.fields(record_type)}


def _referenced_table(f: dataclasses.Field, hint: Any) -> str:
    """Table name of the record type a relation field points at."""
    references = f.metadata.get(REFERENCES_KEY)
    if isinstance(references, type):
        return table_name_of(references)
    if isinstance(references, str) and references:
        return references

    target = element_type(hint)
    if isinstance(target, type) and dataclasses.is_dataclass(target):
        return table_name_of(target)
    if isinstance(target, str):
        return target

    raise MissingDefinitionError(
        f"cannot determine the referenced table of field '{f.name}'", field=f.name
    )


def element_type(hint: Any) -> Any:
    """Strip Optional and collection wrappers off a type hint."""
    if isinstance(hint, typing.ForwardRef):
        return element_type(hint.__forward_arg__)
    if isinstance(hint, str):
        names = [n for n in _IDENTIFIER.findall(hint) if n not in _WRAPPER_NAMES]
        return names[0] if len(names) == 1 else None
    if isinstance(hint, type) and typing.get_origin(hint) is None:
        return hint

    args = [a for a in typing.get_args(hint) if a is not type(None)]
    if len(args) == 1:
        return element_type(args[0])
    return None
