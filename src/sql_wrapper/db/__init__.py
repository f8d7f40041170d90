"""
db - Relational store access for sql_wrapper.
"""

from sql_wrapper.db.connection import create_connection, translate_error, verify_integrity
from sql_wrapper.db.store import (
    SQLiteStore,
    SQLiteTransaction,
    Store,
    Transaction,
    run_statements,
)

__all__ = [
    "create_connection",
    "translate_error",
    "verify_integrity",
    "Store",
    "Transaction",
    "SQLiteStore",
    "SQLiteTransaction",
    "run_statements",
]
