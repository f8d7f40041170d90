"""
sql_wrapper - Relation-aware object mapping over SQL tables

Keeps live collections of dataclass records mirrored into relational
tables, with one-to-one, many-to-one, one-to-many and many-to-many
relations resolved across schemas.
"""

from sql_wrapper.db.store import SQLiteStore, Store, Transaction
from sql_wrapper.errors import (
    AlreadyTrackedError,
    InvalidFieldNameError,
    InvalidIdentityError,
    MissingDefinitionError,
    NoTableNameError,
    NotFoundError,
    NotTrackedError,
    ReferentialIntegrityError,
    SchemaError,
    StatementExecutionError,
    UnknownTableError,
    WrapperError,
)
from sql_wrapper.fields import ColumnSpec, FieldPlan, column, extract_field_plan, transient
from sql_wrapper.logs import configure_logging
from sql_wrapper.manager import SchemaManager
from sql_wrapper.relation import Relation
from sql_wrapper.schema import Schema, SchemaState

__version__ = "0.1.0"
__all__ = [
    # Core
    "Schema",
    "SchemaState",
    "SchemaManager",
    "Relation",
    # Fields
    "column",
    "transient",
    "extract_field_plan",
    "ColumnSpec",
    "FieldPlan",
    # Store
    "Store",
    "Transaction",
    "SQLiteStore",
    # Logging
    "configure_logging",
    # Errors
    "WrapperError",
    "SchemaError",
    "MissingDefinitionError",
    "InvalidFieldNameError",
    "UnknownTableError",
    "NotFoundError",
    "NotTrackedError",
    "AlreadyTrackedError",
    "InvalidIdentityError",
    "NoTableNameError",
    "StatementExecutionError",
    "ReferentialIntegrityError",
]
