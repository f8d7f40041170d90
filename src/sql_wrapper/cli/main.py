import importlib
import logging
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sql_wrapper.config import ENV_DB_PATH, ENV_LOG_LEVEL
from sql_wrapper.db.connection import verify_integrity
from sql_wrapper.db.store import SQLiteStore
from sql_wrapper.errors import WrapperError
from sql_wrapper.fields import extract_field_plan
from sql_wrapper.logs import configure_logging
from sql_wrapper.sql.literals import quote_identifier, quote_string
from sql_wrapper.sql.statements import create_table_sql

app = typer.Typer(help="sql_wrapper inspection CLI")
console = Console()
logger = logging.getLogger("sql_wrapper.cli")


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", envvar=ENV_LOG_LEVEL, help="Log level"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit JSON log lines"),
):
    """Inspect record types and the tables they are stored in."""
    configure_logging(level=log_level, json_format=json_logs)


def load_record_type(target: str) -> type:
    """Import a record class given as 'module:Class'."""
    module_name, _, class_name = target.partition(":")
    if not module_name or not class_name:
        raise typer.BadParameter("expected MODULE:CLASS", param_hint="TARGET")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, class_name)
    except AttributeError:
        raise typer.BadParameter(f"{module_name} has no attribute {class_name}", param_hint="TARGET") from None


@app.command()
def ddl(
    target: str = typer.Argument(..., help="Record class as MODULE:CLASS"),
    path: Optional[str] = typer.Option(None, "--path", "-p", help="Directory to import MODULE from"),
):
    """Print the CREATE TABLE statements for a record type."""
    if path:
        sys.path.insert(0, path)
    record_type = load_record_type(target)

    try:
        plan = extract_field_plan(record_type)
    except WrapperError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    for statement in create_table_sql(plan):
        console.print(statement, highlight=False, soft_wrap=True)


@app.command()
def tables(db_path: str = typer.Argument(..., envvar=ENV_DB_PATH, help="Path to SQLite database")):
    """List tables with their row counts."""
    with SQLiteStore(db_path) as store:
        names = [row[0] for row in store.query(
            "SELECT name FROM sqlite_master WHERE type = 'table' "
            "AND name NOT LIKE 'sqlite_%' ORDER BY name;"
        )]

        table = Table(title=f"Tables in {db_path}")
        table.add_column("Table", style="cyan")
        table.add_column("Rows", style="magenta", justify="right")
        for name in names:
            count = store.query(f"SELECT COUNT(*) FROM {quote_identifier(name)};")[0][0]
            table.add_row(name, str(count))
        console.print(table)

        if not verify_integrity(store.connection):
            console.print("[red]Integrity check failed[/red]")
            raise typer.Exit(code=1)


@app.command()
def dump(
    db_path: str = typer.Argument(..., envvar=ENV_DB_PATH, help="Path to SQLite database"),
    table_name: str = typer.Argument(..., help="Table to print"),
):
    """Print every row of one table."""
    with SQLiteStore(db_path) as store:
        exists = store.query(
            "SELECT COUNT(*) FROM sqlite_master WHERE type = 'table' "
            f"AND name = {quote_string(table_name)};"
        )[0][0]
        if not exists:
            console.print(f"[red]Table {escape(table_name)} not found.[/red]")
            raise typer.Exit(code=1)

        columns = [row[1] for row in store.query(f"PRAGMA table_info({quote_identifier(table_name)});")]
        table = Table(title=table_name)
        for column in columns:
            table.add_column(column)
        for row in store.query(f"SELECT * FROM {quote_identifier(table_name)} ORDER BY rowid;"):
            table.add_row(*("NULL" if v is None else str(v) for v in row))
        console.print(table)


if __name__ == "__main__":
    app()
