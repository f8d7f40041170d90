"""
literals.py - Render Python values as SQL literals.

Statements are handed to the store as plain strings, so every
value is inlined here.
"""

import datetime
import decimal
from enum import Enum
from typing import Any

from sql_wrapper.errors import SchemaError

NULL = "NULL"


def quote_string(value: str) -> str:
    """Single-quote a string, doubling embedded quotes."""
    return "'" + value.replace("'", "''") + "'"


def quote_identifier(name: str) -> str:
    """Double-quote a table or column name so keywords like Order are usable."""
    return '"' + name.replace('"', '""') + '"'


def to_literal(value: Any) -> str:
    """
    Render a value as a SQL literal.

    Raises:
        SchemaError: If the value has no literal representation
    """
    if value is None:
        return NULL
    if isinstance(value, Enum):
        return to_literal(value.value)
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise SchemaError(f"cannot store non-finite float {value!r}")
        return repr(value)
    if isinstance(value, decimal.Decimal):
        # Quoted so the scale survives; store it in a TEXT column
        return quote_string(str(value))
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "X'" + bytes(value).hex() + "'"
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return quote_string(value.isoformat())

    raise SchemaError(
        f"cannot render value of type {type(value).__name__} as SQL",
        record_type=type(value).__name__,
    )
