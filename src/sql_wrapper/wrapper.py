"""
wrapper.py - Identity wrapper for tracked records.

Records carry no primary key of their own while they live in memory,
so a schema pairs each one with an integer identity.
"""

from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from sql_wrapper.schema import Schema

T = TypeVar("T")


class IdentifiableWrapper(Generic[T]):
    """A tracked record together with its identity and owning schema."""

    __slots__ = ("_identity", "_object", "schema")

    def __init__(self, schema: "Schema[Any]", obj: T, identity: int) -> None:
        self.schema = schema
        self._object = obj
        self._identity = identity

    def get_identity(self) -> int:
        return self._identity

    def set_identity(self, identity: int) -> None:
        self._identity = identity

    def object(self) -> T:
        """The wrapped record (the same reference that was saved)."""
        return self._object

    def __repr__(self) -> str:
        return f"IdentifiableWrapper(table={self.schema.name!r}, identity={self._identity})"
