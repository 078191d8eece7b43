"""Output formatters for the DailyVault CLI."""

import json
from typing import Any

from rich.markup import escape
from rich.table import Table

from dailyvault.utils.ui.console import get_console

console = get_console()

# Columns shown per record type, in order
TASK_COLUMNS = ("task_id", "title", "status", "priority", "due_date")
SUBTASK_COLUMNS = ("subtask_id", "title", "status")
TASK_DETAIL_COLUMNS = (
    "task_id",
    "title",
    "description",
    "status",
    "priority",
    "due_date",
    "category_id",
)
DIARY_COLUMNS = ("entry_id", "entry_date", "title", "mood", "tags", "content")
DIARY_DETAIL_COLUMNS = (*DIARY_COLUMNS, "visibility", "emotion_score")
MOOD_COLUMNS = ("mood", "count")
CATEGORY_COLUMNS = ("category_id", "category_name", "color_code")


def format_output(
    data: Any, output_format: str = "table", columns: tuple[str, ...] | None = None
) -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str, ensure_ascii=False))
    else:
        format_table(data, columns)


def _cell(value: Any, limit: int = 60) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value)
    text = str(value)
    return escape(text if len(text) <= limit else text[: limit - 1] + "…")


def format_table(data: Any, columns: tuple[str, ...] | None = None) -> None:
    """Format a list of records as a table."""
    if not data:
        console.print("[yellow]No items found[/yellow]")
        return

    if isinstance(data, dict):
        data = [data]

    columns = columns or tuple(k for k in data[0] if k != "decrypt_errors")
    table = Table(show_header=True, header_style="bold cyan")
    for column in columns:
        table.add_column(column.replace("_", " ").title())

    for item in data:
        failed = set(item.get("decrypt_errors") or [])
        row = []
        for column in columns:
            cell = _cell(item.get(column))
            row.append(f"[red]{cell}[/red]" if column in failed else cell)
        table.add_row(*row)

    console.print(table)


def format_record(
    record: dict[str, Any], columns: tuple[str, ...], output_format: str = "table"
) -> None:
    """Display one record as field and value rows."""
    if output_format == "json":
        format_output(record, "json")
        return

    failed = set(record.get("decrypt_errors") or [])
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Field")
    table.add_column("Value")
    for column in columns:
        cell = _cell(record.get(column), limit=500)
        table.add_row(
            column.replace("_", " ").title(),
            f"[red]{cell}[/red]" if column in failed else cell,
        )

    console.print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")
