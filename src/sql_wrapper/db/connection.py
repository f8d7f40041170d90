"""
connection.py - SQLite database connection management.

Handles connection creation, PRAGMA configuration and translation
of driver errors into sql_wrapper errors.

All connections enforce foreign keys; the relation constraints
synthesized for junction and reference columns depend on it.
"""

import logging
import sqlite3

from sql_wrapper.config import ID_COLUMN, SQLITE_PRAGMAS
from sql_wrapper.errors import ReferentialIntegrityError, StatementExecutionError

logger = logging.getLogger("sql_wrapper.db")

_FOREIGN_KEY_MARKER = "FOREIGN KEY"
_UNIQUE_PREFIX = "UNIQUE constraint failed:"


def create_connection(db_path: str) -> sqlite3.Connection:
    """
    Create a new SQLite connection with proper configuration.

    Applies all required PRAGMA settings. Transactions are
    controlled manually (isolation_level=None).

    Args:
        db_path: Path to SQLite database file

    Returns:
        Configured sqlite3.Connection

    Raises:
        StatementExecutionError: If connection fails
    """
    try:
        conn = sqlite3.connect(
            db_path,
            isolation_level=None,  # Manual transaction control
            check_same_thread=False,
        )
    except sqlite3.Error as e:
        raise StatementExecutionError(
            f"Failed to connect to database: {e}",
            operation="connect",
        ) from e

    _apply_pragmas(conn)
    logger.debug("Opened connection to %s", db_path)
    return conn


def _apply_pragmas(conn: sqlite3.Connection) -> None:
    """
    Apply all required PRAGMA settings.

    Args:
        conn: SQLite connection
    """
    for pragma, value in SQLITE_PRAGMAS.items():
        try:
            conn.execute(f"PRAGMA {pragma} = {value}")
        except sqlite3.Error as e:
            raise StatementExecutionError(
                f"Failed to set PRAGMA {pragma}: {e}",
                operation="pragma",
                sql=f"PRAGMA {pragma} = {value}",
            ) from e


def translate_error(
    error: sqlite3.Error, operation: str, sql: str | None = None
) -> StatementExecutionError:
    """
    Wrap a driver error in the matching sql_wrapper error.

    Foreign key failures and uniqueness failures outside the identity
    column become ReferentialIntegrityError, everything else
    StatementExecutionError. The caller chains the original error
    with `raise ... from error`.
    """
    message = str(error)
    if isinstance(error, sqlite3.IntegrityError) and _is_referential(message):
        return ReferentialIntegrityError(
            f"Constraint failed: {message}", operation=operation, sql=sql
        )
    return StatementExecutionError(
        f"Statement failed: {message}", operation=operation, sql=sql
    )


def _is_referential(message: str) -> bool:
    """
    True for foreign key failures and uniqueness failures on relation
    columns. A collision on the identity column is not referential.
    """
    if _FOREIGN_KEY_MARKER in message.upper():
        return True
    if not message.startswith(_UNIQUE_PREFIX):
        return False
    # "UNIQUE constraint failed: Table.col1, Table.col2"
    columns = [c.strip() for c in message[len(_UNIQUE_PREFIX):].split(",")]
    return any(c.rpartition(".")[2] != ID_COLUMN for c in columns)


def verify_integrity(conn: sqlite3.Connection) -> bool:
    """
    Run SQLite integrity and foreign key checks.

    Args:
        conn: SQLite connection

    Returns:
        True if database is healthy
    """
    try:
        result = conn.execute("PRAGMA integrity_check").fetchone()
        if result is None or result[0] != "ok":
            return False
        return conn.execute("PRAGMA foreign_key_check").fetchone() is None
    except sqlite3.Error:
        return False
