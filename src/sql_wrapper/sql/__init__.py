"""
sql - SQL statement synthesis for sql_wrapper.
"""

from sql_wrapper.sql.literals import quote_identifier, to_literal
from sql_wrapper.sql.statements import (
    create_table_sql,
    delete_sql,
    insert_sql,
    select_sql,
    update_sql,
)

__all__ = [
    "to_literal",
    "quote_identifier",
    "create_table_sql",
    "insert_sql",
    "update_sql",
    "delete_sql",
    "select_sql",
]
