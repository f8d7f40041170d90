"""
store.py - Statement execution interface.

Schemas talk to the relational store only through Store and
Transaction. Statements are opaque strings; results are not
inspected beyond success or failure.

SQLiteStore is the bundled implementation.
"""

import logging
import sqlite3
from typing import Any, Protocol, Sequence

from sql_wrapper.db.connection import create_connection, translate_error

logger = logging.getLogger("sql_wrapper.db")


class Transaction(Protocol):
    def execute(self, statement: str) -> Any: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


class Store(Protocol):
    def begin(self) -> Transaction: ...

    def query(self, statement: str) -> list[tuple]: ...

    def close(self) -> None: ...


class SQLiteTransaction:
    """One EXCLUSIVE transaction on a SQLite connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        try:
            conn.execute("BEGIN EXCLUSIVE")
        except sqlite3.Error as e:
            raise translate_error(e, "begin") from e

    def execute(self, statement: str) -> sqlite3.Cursor:
        try:
            return self._conn.execute(statement)
        except sqlite3.Error as e:
            raise translate_error(e, "execute", statement) from e

    def commit(self) -> None:
        try:
            self._conn.execute("COMMIT")
        except sqlite3.Error as e:
            raise translate_error(e, "commit") from e

    def rollback(self) -> None:
        if not self._conn.in_transaction:
            return
        try:
            self._conn.execute("ROLLBACK")
        except sqlite3.Error as e:
            raise translate_error(e, "rollback") from e


class SQLiteStore:
    """
    Store backed by a single SQLite connection.

    Usable as a context manager; the connection is opened lazily.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def __enter__(self) -> "SQLiteStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = create_connection(self._db_path)
        return self._conn

    def begin(self) -> SQLiteTransaction:
        return SQLiteTransaction(self.connection)

    def query(self, statement: str) -> list[tuple]:
        try:
            return self.connection.execute(statement).fetchall()
        except sqlite3.Error as e:
            raise translate_error(e, "query", statement) from e

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None


def run_statements(store: Store, statements: Sequence[str], operation: str) -> None:
    """
    Execute statements as one atomic unit.

    All statements commit together or none do: any failure rolls
    the transaction back and the error propagates unchanged.

    Args:
        store: Store to execute against
        statements: Ordered statements
        operation: Name of the calling operation, for logging
    """
    tx = store.begin()
    try:
        for statement in statements:
            logger.debug("%s: %s", operation, statement)
            tx.execute(statement)
        tx.commit()
    except Exception:
        tx.rollback()
        raise
