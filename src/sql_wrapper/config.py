"""
config.py - Configuration constants for sql_wrapper.

All configuration is immutable and defined at module level.
No mutable global state is permitted.
"""

from typing import Final

# Primary key column added to every owning table
ID_COLUMN: Final[str] = "id"
ID_DEFINITION: Final[str] = "INTEGER PRIMARY KEY"

# Field metadata keys (dataclasses.field(metadata=...))
NAME_KEY: Final[str] = "sql"
DEFINITION_KEY: Final[str] = "def"
RELATION_KEY: Final[str] = "rel"
REFERENCES_KEY: Final[str] = "references"
ON_DELETE_KEY: Final[str] = "on_delete"

# A column name of "-" excludes the field from persistence
SKIP_SENTINEL: Final[str] = "-"

# Class attribute that overrides the table name of a record type
TABLE_NAME_ATTRIBUTE: Final[str] = "__tablename__"

# Foreign identity columns and junction columns
FOREIGN_DEFINITION: Final[str] = "INTEGER"
JUNCTION_OWNER_SUFFIX: Final[str] = "ID"

# Referential actions
DEFAULT_ON_DELETE: Final[str] = "RESTRICT"
ON_UPDATE: Final[str] = "CASCADE"
REFERENTIAL_ACTIONS: Final[frozenset[str]] = frozenset(
    {"RESTRICT", "CASCADE", "SET NULL", "NO ACTION"}
)

# Identity handed out by an empty registry
FIRST_IDENTITY: Final[int] = 1

# SQLite PRAGMA settings applied to every connection
# foreign_keys must be ON for the junction and reference constraints to hold
SQLITE_PRAGMAS: Final[dict[str, str]] = {
    "journal_mode": "WAL",
    "synchronous": "NORMAL",
    "foreign_keys": "ON",
    "busy_timeout": "5000",
}

# Environment variables read by the CLI
ENV_DB_PATH: Final[str] = "SQL_WRAPPER_DB_PATH"
ENV_LOG_LEVEL: Final[str] = "SQL_WRAPPER_LOG_LEVEL"
