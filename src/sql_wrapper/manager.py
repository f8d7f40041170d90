"""
manager.py - Cross-schema resolution.

A SchemaManager is a directory from table name to Schema. Every
Schema is handed a manager at construction and registers itself
once its table exists; schemas then use the manager to turn foreign
records into identities (when writing) and identities back into
records (when reading).

Construct one manager per store and create the schemas of referenced
record types before the schemas that reference them.
"""

import logging
from typing import TYPE_CHECKING, Any

from sql_wrapper.errors import UnknownTableError

if TYPE_CHECKING:
    from sql_wrapper.schema import Schema

logger = logging.getLogger("sql_wrapper.manager")


class SchemaManager:
    """Directory of schemas that can reference one another."""

    def __init__(self) -> None:
        self._schemas: dict[str, "Schema[Any]"] = {}

    def register(self, table_name: str, schema: "Schema[Any]") -> None:
        """Register a schema under its table name, replacing any previous one."""
        if table_name in self._schemas and self._schemas[table_name] is not schema:
            logger.info("Replacing schema registered for table %s", table_name)
        self._schemas[table_name] = schema

    def get_schema(self, table_name: str) -> "Schema[Any]":
        try:
            return self._schemas[table_name]
        except KeyError:
            raise UnknownTableError(table_name) from None

    def resolve(self, table_name: str, identity: int) -> Any:
        """
        Get the record stored under an identity in another table.

        Raises:
            UnknownTableError: No schema is registered for table_name
            NotFoundError: The schema has no record with that identity
        """
        return self.get_schema(table_name).get_by_identity(identity)

    def identity_of(self, table_name: str, record: Any) -> int:
        """
        Get the identity a record has in another table.

        Raises:
            UnknownTableError: No schema is registered for table_name
            NotTrackedError: The schema does not track that record
        """
        return self.get_schema(table_name).get_identity(record)

    def tables(self) -> list[str]:
        return list(self._schemas)

    def __contains__(self, table_name: object) -> bool:
        return table_name in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)
