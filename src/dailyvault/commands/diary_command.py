"""Encrypted diary commands."""

import typer

from dailyvault.api.client import get_client
from dailyvault.api.diary import DiaryAPI
from dailyvault.commands.decorators import SECRET_OPTION, command_wrapper, resolve_secret
from dailyvault.services.config_service import get_config_service
from dailyvault.services.vault_service import VaultService
from dailyvault.utils.ui.console import get_console
from dailyvault.utils.ui.formatters import (
    DIARY_COLUMNS,
    DIARY_DETAIL_COLUMNS,
    MOOD_COLUMNS,
    format_output,
    format_record,
    format_success,
    format_warning,
)

app = typer.Typer(help="Diary commands")
console = get_console()


def get_vault_service(secret: str | None) -> VaultService:
    """Build a VaultService for the current user."""
    return VaultService.from_config(get_config_service(), resolve_secret(secret))


@app.command("list")
@command_wrapper
async def list_entries(
    mood: str | None = typer.Option(None, "--mood"),
    date: str | None = typer.Option(None, "--date", help="Entry date (YYYY-MM-DD)"),
    limit: int = typer.Option(5, "--limit"),
    page: int = typer.Option(0, "--page", help="Zero-based page"),
    output: str | None = typer.Option(None, "--output", help="Output format (table, json)"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """List diary entries."""
    service = get_vault_service(secret)
    output = output or get_config_service().config.output.format

    async with service.api_client:
        entries = await service.list_entries(
            mood=mood, entry_date=date, limit=limit, offset=page * limit
        )

    format_output(entries, output, DIARY_COLUMNS)


@app.command("show")
@command_wrapper
async def show_entry(
    entry_id: int = typer.Argument(..., help="Entry ID"),
    output: str | None = typer.Option(None, "--output", help="Output format (table, json)"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Show one diary entry."""
    service = get_vault_service(secret)
    output = output or get_config_service().config.output.format

    async with service.api_client:
        entry = await service.get_entry(entry_id)

    format_record(entry, DIARY_DETAIL_COLUMNS, output)


@app.command("add")
@command_wrapper
async def add_entry(
    content: str = typer.Argument(..., help="Entry text"),
    title: str | None = typer.Option(None, "--title", "-t"),
    tags: list[str] | None = typer.Option(None, "--tag", help="Tag (repeatable)"),
    mood: str | None = typer.Option(None, "--mood"),
    visibility: str = typer.Option("private", "--visibility"),
    date: str | None = typer.Option(None, "--date", help="Entry date (YYYY-MM-DD)"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Encrypt and save a diary entry."""
    service = get_vault_service(secret)
    async with service.api_client:
        await service.add_entry(
            content,
            title,
            tags or None,
            mood=mood,
            visibility=visibility,
            entry_date=date,
        )
    format_success("Entry saved")


@app.command("edit")
@command_wrapper
async def edit_entry(
    entry_id: int = typer.Argument(..., help="Entry ID"),
    content: str | None = typer.Option(None, "--content", "-c"),
    title: str | None = typer.Option(None, "--title", "-t"),
    tags: list[str] | None = typer.Option(None, "--tag", help="Tag (repeatable, replaces all)"),
    mood: str | None = typer.Option(None, "--mood"),
    visibility: str | None = typer.Option(None, "--visibility"),
    date: str | None = typer.Option(None, "--date", help="Entry date (YYYY-MM-DD)"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Change a diary entry. Fields not given are left as they are."""
    changes = {
        "content": content,
        "title": title,
        "tags": tags or None,
        "mood": mood,
        "visibility": visibility,
        "entry_date": date,
    }
    changes = {k: v for k, v in changes.items() if v is not None}

    service = get_vault_service(secret)
    async with service.api_client:
        await service.update_entry(entry_id, **changes)
    format_success(f"Entry {entry_id} updated")


@app.command("delete")
@command_wrapper
async def delete_entry(
    entry_id: int = typer.Argument(..., help="Entry ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Delete a diary entry."""
    if not yes and not typer.confirm(f"Delete entry {entry_id}?"):
        console.print("[yellow]Aborted.[/yellow]")
        return
    service = get_vault_service(secret)
    async with service.api_client:
        await service.delete_entry(entry_id)
    format_success(f"Entry {entry_id} deleted")


@app.command("search")
@command_wrapper
async def search_entries(
    query: str = typer.Argument("", help="Text to look for in title or content"),
    tag: str | None = typer.Option(None, "--tag"),
    mood: str | None = typer.Option(None, "--mood"),
    output: str | None = typer.Option(None, "--output", help="Output format (table, json)"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Search entries. Matching happens locally after decryption."""
    service = get_vault_service(secret)
    output = output or get_config_service().config.output.format

    async with service.api_client:
        entries = await service.search_entries(query, tag=tag, mood=mood)

    format_output(entries, output, DIARY_COLUMNS)


@app.command("moods")
@command_wrapper
async def mood_stats(
    since: str | None = typer.Option(None, "--since", help="First date (YYYY-MM-DD)"),
    until: str | None = typer.Option(None, "--until", help="Last date (YYYY-MM-DD)"),
    output: str | None = typer.Option(None, "--output", help="Output format (table, json)"),
) -> None:
    """Count entries per mood. Moods are stored in plaintext."""
    output = output or get_config_service().config.output.format

    async with get_client(get_config_service()) as client:
        result = await DiaryAPI(client).mood_stats(since=since, until=until)

    format_output(result.get("stats") or [], output, MOOD_COLUMNS)


@app.command("missing")
@command_wrapper
async def missing_dates(
    output: str | None = typer.Option(None, "--output", help="Output format (table, json)"),
) -> None:
    """List the last three days, today excluded, that have no entry."""
    output = output or get_config_service().config.output.format

    async with get_client(get_config_service()) as client:
        result = await DiaryAPI(client).missing_dates()

    missing = result.get("missing") or []
    if output == "json":
        format_output(missing, output)
    elif missing:
        format_warning(f"No entry for {', '.join(missing)}")
    else:
        format_success("No missing days")
