"""
errors.py - Domain-specific exceptions for sql_wrapper.

All exceptions inherit from WrapperError for unified handling.
Each exception type represents a distinct failure mode.
"""

from typing import Any


class WrapperError(Exception):
    """Base exception for all sql_wrapper errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


class SchemaError(WrapperError):
    """
    Raised when a record type cannot be mapped to a table.

    This includes non-dataclass record types and values that
    have no SQL literal representation.
    """

    def __init__(self, message: str, record_type: str | None = None) -> None:
        context = {}
        if record_type is not None:
            context["record_type"] = record_type
        super().__init__(message, context=context)
        self.record_type = record_type


class FieldError(WrapperError):
    """Base class for problems with a single field's metadata."""

    def __init__(self, message: str, field: str | None = None) -> None:
        context = {}
        if field is not None:
            context["field"] = field
        super().__init__(message, context=context)
        self.field = field


class MissingDefinitionError(FieldError):
    """
    Raised when a persisted, non-relation field carries no SQL definition,
    or a relation field's referenced table cannot be determined.
    """


class InvalidFieldNameError(FieldError):
    """
    Raised when a field resolves to an empty or conflicting column name.
    """


class UnknownTableError(WrapperError):
    """Raised when no schema is registered under a table name."""

    def __init__(self, table_name: str) -> None:
        super().__init__(
            "schema is not registered with the manager",
            context={"table_name": table_name},
        )
        self.table_name = table_name


class NotFoundError(WrapperError):
    """Raised when an identity is not present in a schema."""

    def __init__(self, table_name: str, identity: int) -> None:
        super().__init__(
            "no object with identity in schema",
            context={"table_name": table_name, "identity": identity},
        )
        self.table_name = table_name
        self.identity = identity


class NotTrackedError(WrapperError):
    """
    Raised when a record is not tracked by a schema.

    Tracking is by reference: an equal but distinct record is not tracked.
    """

    def __init__(self, table_name: str) -> None:
        super().__init__("object is not in schema", context={"table_name": table_name})
        self.table_name = table_name


class AlreadyTrackedError(WrapperError):
    """Raised when inserting a record the schema already tracks."""

    def __init__(self, table_name: str, identity: int) -> None:
        super().__init__(
            "object is already in schema",
            context={"table_name": table_name, "identity": identity},
        )
        self.table_name = table_name
        self.identity = identity


class InvalidIdentityError(WrapperError):
    """Raised when a tracked record carries a negative identity."""

    def __init__(self, table_name: str, identity: int) -> None:
        super().__init__(
            "object does not have valid identity",
            context={"table_name": table_name, "identity": identity},
        )
        self.table_name = table_name
        self.identity = identity


class NoTableNameError(WrapperError):
    """
    Raised when a schema is used before its table was created.

    A schema whose table creation failed stays in this state.
    """

    def __init__(self, state: str | None = None) -> None:
        context = {}
        if state is not None:
            context["state"] = state
        super().__init__("schema has no table name", context=context)
        self.state = state


class StatementExecutionError(WrapperError):
    """
    Raised when the store rejects a statement.

    The transaction has been rolled back by the time this is raised.
    The underlying driver error is chained as __cause__.
    """

    def __init__(
        self, message: str, operation: str | None = None, sql: str | None = None
    ) -> None:
        context = {}
        if operation is not None:
            context["operation"] = operation
        if sql is not None:
            # Truncate long SQL for readability
            context["sql"] = sql[:200] + "..." if len(sql) > 200 else sql
        super().__init__(message, context=context)
        self.operation = operation
        self.sql = sql


class ReferentialIntegrityError(StatementExecutionError):
    """
    Raised when a statement violates a foreign key or uniqueness constraint.

    Typical cause: deleting a row another table still references
    without a cascading delete action.
    """
