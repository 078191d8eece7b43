"""Category commands. Category names are not encrypted, so no secret is needed."""

import typer

from dailyvault.api.categories import CategoriesAPI
from dailyvault.api.client import get_client
from dailyvault.commands.decorators import command_wrapper
from dailyvault.services.config_service import get_config_service
from dailyvault.utils.ui.console import get_console
from dailyvault.utils.ui.formatters import CATEGORY_COLUMNS, format_output, format_success

app = typer.Typer(help="Category management commands")
console = get_console()


@app.command("list")
@command_wrapper
async def list_categories(
    output: str | None = typer.Option(None, "--output", help="Output format (table, json)"),
) -> None:
    """List categories."""
    output = output or get_config_service().config.output.format

    async with get_client(get_config_service()) as client:
        result = await CategoriesAPI(client).list_categories()

    format_output(result.get("categories") or [], output, CATEGORY_COLUMNS)


@app.command("add")
@command_wrapper
async def add_category(
    name: str = typer.Argument(..., help="Category name"),
    color: str | None = typer.Option(None, "--color", help="Colour code, e.g. #ff0000"),
) -> None:
    """Create a category."""
    name = name.strip()
    if not name:
        raise ValueError("Category name required")

    async with get_client(get_config_service()) as client:
        await CategoriesAPI(client).create_category(name, color_code=color)
    format_success(f"Category '{name}' created")


@app.command("rename")
@command_wrapper
async def rename_category(
    category_id: int = typer.Argument(..., help="Category ID"),
    name: str = typer.Argument(..., help="New name"),
    color: str | None = typer.Option(None, "--color", help="Colour code, e.g. #ff0000"),
) -> None:
    """Rename a category. The server replaces the colour too."""
    name = name.strip()
    if not name:
        raise ValueError("Category name required")

    async with get_client(get_config_service()) as client:
        await CategoriesAPI(client).update_category(
            category_id, category_name=name, color_code=color
        )
    format_success(f"Category {category_id} renamed")


@app.command("delete")
@command_wrapper
async def delete_categories(
    category_ids: list[int] = typer.Argument(..., help="One or more category IDs"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete categories."""
    ids = ", ".join(str(i) for i in category_ids)
    if not yes and not typer.confirm(f"Delete category {ids}?"):
        console.print("[yellow]Aborted.[/yellow]")
        return

    async with get_client(get_config_service()) as client:
        api = CategoriesAPI(client)
        if len(category_ids) == 1:
            await api.delete_category(category_ids[0])
        else:
            await api.delete_categories(category_ids)
    format_success(f"Deleted category {ids}")
