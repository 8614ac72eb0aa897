"""
Result rendering

Turns StatementResult objects into rich console output: the statement echo,
then either a table of records, an affected-row count, or a status message.
"""

from datetime import datetime

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adasql.models import RowValue, StatementResult


def format_value(value: RowValue) -> str:
    """Render a hydrated value for display."""
    if value is None:
        return "NULL"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, bytes):
        return "0x" + value.hex()
    return str(value)


def build_table(records: list[dict]) -> Table:
    """Build a rich Table from hydrated rows (columns from the first row)."""
    table = Table(show_header=True, header_style="bold cyan")
    if not records:
        return table
    for label in records[0]:
        table.add_column(escape(label))
    for row in records:
        table.add_row(*(escape(format_value(value)) for value in row.values()))
    return table


def render_result(console: Console, result: StatementResult) -> None:
    """Print one statement result."""
    if not result.sql and result.message is None:
        return

    console.print(f"[dim]{escape(result.sql)}[/dim]")

    if result.status != "success":
        console.print(f"[red]✗[/red] {escape(result.message or 'Statement failed')}")
        return

    if result.records is not None:
        if result.records:
            console.print(build_table(result.records))
        console.print(f"[blue]Record Count:[/blue] {result.record_count}")
    elif result.affected_count is not None:
        console.print(f"[blue]Number of Affected Records:[/blue] {result.affected_count}")
    elif result.message:
        console.print(f"[green]✓[/green] {escape(result.message)}")
    else:
        console.print("[green]✓[/green] OK")
