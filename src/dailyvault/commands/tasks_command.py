"""Encrypted task commands."""

import typer

from dailyvault.commands.decorators import SECRET_OPTION, command_wrapper, resolve_secret
from dailyvault.services.config_service import get_config_service
from dailyvault.services.vault_service import VaultService
from dailyvault.utils.ui.console import get_console
from dailyvault.utils.ui.formatters import (
    SUBTASK_COLUMNS,
    TASK_COLUMNS,
    TASK_DETAIL_COLUMNS,
    format_output,
    format_record,
    format_success,
    format_warning,
)

app = typer.Typer(help="Task management commands")
console = get_console()


def get_vault_service(secret: str | None) -> VaultService:
    """Build a VaultService for the current user."""
    return VaultService.from_config(get_config_service(), resolve_secret(secret))


def _confirmed(prompt: str, yes: bool) -> bool:
    if yes or typer.confirm(prompt):
        return True
    console.print("[yellow]Aborted.[/yellow]")
    return False


@app.command("list")
@command_wrapper
async def list_tasks(
    status: str | None = typer.Option(None, "--status", help="Filter by status"),
    priority: str | None = typer.Option(None, "--priority", help="Filter by priority"),
    category: int | None = typer.Option(None, "--category", help="Filter by category ID"),
    page: int = typer.Option(1, "--page", help="Page number"),
    output: str | None = typer.Option(None, "--output", help="Output format (table, json)"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """List tasks, decrypting titles and descriptions locally."""
    service = get_vault_service(secret)
    output = output or get_config_service().config.output.format

    async with service.api_client:
        tasks = await service.list_tasks(
            status=status, priority=priority, category_id=category, page=page
        )

    format_output(tasks, output, TASK_COLUMNS)
    failed = sum(1 for t in tasks if t.get("decrypt_errors"))
    if failed:
        format_warning(f"{failed} task(s) could not be fully decrypted")


@app.command("show")
@command_wrapper
async def show_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    output: str | None = typer.Option(None, "--output", help="Output format (table, json)"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Show one task and its subtasks."""
    service = get_vault_service(secret)
    output = output or get_config_service().config.output.format

    async with service.api_client:
        task = await service.get_task(task_id)

    format_record(task, TASK_DETAIL_COLUMNS, output)
    if output == "json":
        return
    if task.get("subtasks"):
        format_output(task["subtasks"], output, SUBTASK_COLUMNS)
    if task.get("decrypt_errors"):
        format_warning("This task could not be fully decrypted")


@app.command("add")
@command_wrapper
async def add_task(
    title: str = typer.Argument(..., help="Task title"),
    description: str | None = typer.Option(None, "--description", "-d"),
    priority: str = typer.Option("Medium", "--priority", "-p", help="Low, Medium or High"),
    due: str | None = typer.Option(None, "--due", help="Due date (YYYY-MM-DD HH:MM:SS)"),
    category: int | None = typer.Option(None, "--category", help="Category ID"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Encrypt and create a task."""
    service = get_vault_service(secret)
    async with service.api_client:
        await service.create_task(
            title,
            description,
            priority=priority,
            due_date=due,
            category_id=category,
        )
    format_success("Task created")


@app.command("edit")
@command_wrapper
async def edit_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    title: str | None = typer.Option(None, "--title", "-t"),
    description: str | None = typer.Option(None, "--description", "-d"),
    priority: str | None = typer.Option(None, "--priority", "-p", help="Low, Medium or High"),
    due: str | None = typer.Option(None, "--due", help="Due date (YYYY-MM-DD HH:MM:SS)"),
    category: int | None = typer.Option(None, "--category", help="Category ID"),
    status: str | None = typer.Option(None, "--status"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Change a task. Fields not given keep their current value."""
    changes = {
        "title": title,
        "description": description,
        "priority": priority,
        "due_date": due,
        "category_id": category,
        "status": status,
    }
    changes = {k: v for k, v in changes.items() if v is not None}

    service = get_vault_service(secret)
    async with service.api_client:
        await service.update_task(task_id, **changes)
    format_success(f"Task {task_id} updated")


@app.command("done")
@command_wrapper
async def complete_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    undo: bool = typer.Option(False, "--undo", help="Mark as pending again"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Mark a task as completed."""
    service = get_vault_service(secret)
    async with service.api_client:
        await service.set_task_status(task_id, done=not undo)
    format_success(f"Task {task_id} marked {'pending' if undo else 'completed'}")


@app.command("delete")
@command_wrapper
async def delete_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Delete a task and its subtasks."""
    if not _confirmed(f"Delete task {task_id}?", yes):
        return
    service = get_vault_service(secret)
    async with service.api_client:
        await service.delete_task(task_id)
    format_success(f"Task {task_id} deleted")


@app.command("subtasks")
@command_wrapper
async def list_subtasks(
    task_id: int = typer.Argument(..., help="Task ID"),
    output: str | None = typer.Option(None, "--output", help="Output format (table, json)"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """List the subtasks of a task."""
    service = get_vault_service(secret)
    output = output or get_config_service().config.output.format

    async with service.api_client:
        subtasks = await service.list_subtasks(task_id)

    format_output(subtasks, output, SUBTASK_COLUMNS)


@app.command("add-subtask")
@command_wrapper
async def add_subtask(
    task_id: int = typer.Argument(..., help="Task ID"),
    title: str = typer.Argument(..., help="Subtask title"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Encrypt and add a subtask."""
    service = get_vault_service(secret)
    async with service.api_client:
        await service.add_subtask(task_id, title)
    format_success("Subtask added")


@app.command("subtask-done")
@command_wrapper
async def complete_subtask(
    subtask_id: int = typer.Argument(..., help="Subtask ID"),
    undo: bool = typer.Option(False, "--undo", help="Mark as pending again"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Mark a subtask as completed."""
    service = get_vault_service(secret)
    async with service.api_client:
        await service.set_subtask_status(subtask_id, done=not undo)
    format_success(f"Subtask {subtask_id} marked {'pending' if undo else 'completed'}")


@app.command("delete-subtask")
@command_wrapper
async def delete_subtask(
    subtask_id: int = typer.Argument(..., help="Subtask ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Delete a subtask."""
    if not _confirmed(f"Delete subtask {subtask_id}?", yes):
        return
    service = get_vault_service(secret)
    async with service.api_client:
        await service.delete_subtask(subtask_id)
    format_success(f"Subtask {subtask_id} deleted")
