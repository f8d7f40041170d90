"""
schema.py - Table registry for one record type.

A Schema owns the in-memory identity map of one record type, mirrors
it into a table (plus junction tables for collection relations) and
keeps both sides in step:

- every write is synthesized into an ordered statement sequence and
  executed as one transaction
- the identity map changes only after that transaction commits

Records are tracked by reference. Two equal but distinct records are
two entries; a record is found again only through the very object
that was saved.
"""

import logging
from enum import Enum
from typing import Any, Generic, Iterator, TypeVar

from sql_wrapper.config import FIRST_IDENTITY
from sql_wrapper.db.store import Store, run_statements
from sql_wrapper.errors import (
    AlreadyTrackedError,
    InvalidIdentityError,
    NoTableNameError,
    NotFoundError,
    NotTrackedError,
    SchemaError,
    WrapperError,
)
from sql_wrapper.fields import FieldPlan, extract_field_plan
from sql_wrapper.manager import SchemaManager
from sql_wrapper.reader import read_rows
from sql_wrapper.sql.statements import (
    create_table_sql,
    delete_sql,
    insert_sql,
    select_sql,
    update_sql,
)
from sql_wrapper.wrapper import IdentifiableWrapper

logger = logging.getLogger("sql_wrapper.schema")

T = TypeVar("T")


class SchemaState(Enum):
    UNINITIALIZED = "uninitialized"
    CONSTRUCTING = "constructing"
    READY = "ready"
    FAILED = "failed"


class _PendingResolver:
    """Resolves identities for an insert, including the row being inserted."""

    def __init__(self, manager: SchemaManager, table: str, record: Any, identity: int) -> None:
        self._manager = manager
        self._table = table
        self._record = record
        self._identity = identity

    def identity_of(self, table_name: str, record: Any) -> int:
        if table_name == self._table and record is self._record:
            return self._identity
        return self._manager.identity_of(table_name, record)


class Schema(Generic[T]):
    """
    In-memory authority for the persisted instances of one record type.

    The record type's field plan is extracted once, here. Unless
    create=False, the table is created immediately and the schema
    registers itself with the manager.
    """

    def __init__(
        self,
        store: Store,
        record_type: type[T],
        manager: SchemaManager,
        create: bool = True,
    ) -> None:
        self._store = store
        self._record_type = record_type
        self._manager = manager
        self._plan: FieldPlan = extract_field_plan(record_type)

        self._table = ""
        self._state = SchemaState.UNINITIALIZED
        self._objects: dict[int, IdentifiableWrapper[T]] = {}
        self._index: dict[int, int] = {}  # id(record) -> identity
        self._next_identity = FIRST_IDENTITY

        if create:
            self.create()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        """Table name; empty until the table has been created."""
        return self._table

    @property
    def plan(self) -> FieldPlan:
        return self._plan

    @property
    def record_type(self) -> type[T]:
        return self._record_type

    @property
    def state(self) -> SchemaState:
        return self._state

    @property
    def next_identity(self) -> int:
        return self._next_identity

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, record: object) -> bool:
        return self._lookup(record) is not None

    def __iter__(self) -> Iterator[T]:
        return iter([w.object() for w in self._objects.values()])

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create(self) -> None:
        """
        Create the table and junction tables, then register with the manager.

        A failure leaves the schema FAILED; it cannot be used afterwards.
        """
        if self._state is not SchemaState.UNINITIALIZED:
            raise SchemaError(
                f"schema cannot be created from state {self._state.value}",
                record_type=self._record_type.__name__,
            )

        self._state = SchemaState.CONSTRUCTING
        statements = create_table_sql(self._plan)
        try:
            run_statements(self._store, statements, operation="create")
        except WrapperError as e:
            self._state = SchemaState.FAILED
            logger.warning(
                "Creating table %s failed: %s", self._plan.table, e,
                extra={"table": self._plan.table, "operation": "create"},
            )
            raise

        self._table = self._plan.table
        self._state = SchemaState.READY
        self._manager.register(self._table, self)
        logger.info(
            "Created table %s (%d statements)", self._table, len(statements),
            extra={"table": self._table, "statements": len(statements)},
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, record: T) -> None:
        """Update the record if this schema tracks it, otherwise insert it."""
        if self._lookup(record) is None:
            self.insert(record)
        else:
            self.update(record)

    def insert(self, record: T) -> int:
        """
        Insert a new record and return its identity.

        The identity is consumed even if the insert fails; the next
        insert gets a fresh one.
        """
        self._require_ready()
        existing = self._lookup(record)
        if existing is not None:
            raise AlreadyTrackedError(self._table, existing.get_identity())

        identity = self._next_identity
        self._next_identity += 1
        wrapper = IdentifiableWrapper(self, record, identity)

        resolver = _PendingResolver(self._manager, self._table, record, identity)
        try:
            statements = insert_sql(self._plan, identity, record, resolver)
            run_statements(self._store, statements, operation="insert")
        except WrapperError as e:
            logger.warning(
                "Insert into %s failed: %s", self._table, e,
                extra={"table": self._table, "identity": identity, "operation": "insert"},
            )
            raise

        self._track(wrapper)
        logger.debug(
            "Inserted %s %d", self._table, identity,
            extra={"table": self._table, "identity": identity, "statements": len(statements)},
        )
        return identity

    def update(self, record: T) -> None:
        """Write a tracked record's current field values to the store."""
        self._require_ready()
        identity = self._checked_identity(self._validate(record))

        try:
            statements = update_sql(self._plan, identity, record, self._manager)
            run_statements(self._store, statements, operation="update")
        except WrapperError as e:
            logger.warning(
                "Update of %s %d failed: %s", self._table, identity, e,
                extra={"table": self._table, "identity": identity, "operation": "update"},
            )
            raise

        logger.debug(
            "Updated %s %d", self._table, identity,
            extra={"table": self._table, "identity": identity, "statements": len(statements)},
        )

    def delete(self, record: T) -> None:
        """
        Delete a tracked record.

        Fails with ReferentialIntegrityError while another table still
        references the row without a cascading delete action.
        """
        self._require_ready()
        wrapper = self._validate(record)
        identity = self._checked_identity(wrapper)

        try:
            run_statements(self._store, delete_sql(self._plan, identity), operation="delete")
        except WrapperError as e:
            logger.warning(
                "Delete of %s %d failed: %s", self._table, identity, e,
                extra={"table": self._table, "identity": identity, "operation": "delete"},
            )
            raise

        self._untrack(wrapper)
        logger.debug(
            "Deleted %s %d", self._table, identity,
            extra={"table": self._table, "identity": identity},
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self) -> dict[int, T]:
        """Snapshot of all tracked records by identity."""
        self._require_ready()
        return {identity: w.object() for identity, w in self._objects.items()}

    def get_by_identity(self, identity: int) -> T:
        wrapper = self._objects.get(identity)
        if wrapper is None:
            raise NotFoundError(self._table, identity)
        return wrapper.object()

    def get_identity(self, record: T) -> int:
        return self._checked_identity(self._validate(record))

    def read(self) -> None:
        """
        Replace the identity map with the store's current contents.

        Uses the record type's own `read_rows(store, manager)` classmethod
        when it has one. Schemas of referenced tables must be read first.
        """
        self._require_ready()

        custom = getattr(self._record_type, "read_rows", None)
        if callable(custom):
            items = custom(self._store, self._manager)
        else:
            items = read_rows(self._plan, self._store, self._manager)

        objects: dict[int, IdentifiableWrapper[T]] = {}
        index: dict[int, int] = {}
        for identity, record in items.items():
            if id(record) in index:
                raise SchemaError(
                    f"row reader returned one record under identities "
                    f"{index[id(record)]} and {identity}",
                    record_type=self._record_type.__name__,
                )
            objects[identity] = IdentifiableWrapper(self, record, identity)
            index[id(record)] = identity

        self._objects = objects
        self._index = index
        self._next_identity = max(objects, default=FIRST_IDENTITY - 1) + 1
        logger.info(
            "Read %d records from %s", len(objects), self._table,
            extra={"table": self._table, "records": len(objects)},
        )

    def select_sql(self) -> str:
        self._require_ready()
        return select_sql(self._plan)

    # ------------------------------------------------------------------
    # Tracking
    # ------------------------------------------------------------------

    def _require_ready(self) -> None:
        if self._state is not SchemaState.READY:
            raise NoTableNameError(self._state.value)

    def _lookup(self, record: object) -> IdentifiableWrapper[T] | None:
        identity = self._index.get(id(record))
        if identity is None:
            return None
        wrapper = self._objects.get(identity)
        if wrapper is None or wrapper.object() is not record:
            return None
        return wrapper

    def _validate(self, record: object) -> IdentifiableWrapper[T]:
        wrapper = self._lookup(record)
        if wrapper is None:
            raise NotTrackedError(self._table)
        return wrapper

    def _checked_identity(self, wrapper: IdentifiableWrapper[T]) -> int:
        identity = wrapper.get_identity()
        if identity < 0:
            raise InvalidIdentityError(self._table, identity)
        return identity

    def _track(self, wrapper: IdentifiableWrapper[T]) -> None:
        identity = wrapper.get_identity()
        self._objects[identity] = wrapper
        self._index[id(wrapper.object())] = identity

    def _untrack(self, wrapper: IdentifiableWrapper[T]) -> None:
        self._objects.pop(wrapper.get_identity(), None)
        self._index.pop(id(wrapper.object()), None)
