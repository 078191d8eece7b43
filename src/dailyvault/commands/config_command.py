"""Configuration commands."""

import typer

from dailyvault.commands.decorators import command_wrapper
from dailyvault.services.config_service import get_config_service
from dailyvault.utils.ui.console import get_console
from dailyvault.utils.ui.formatters import format_success

app = typer.Typer(help="Configuration management")
console = get_console()


@app.command("show")
@command_wrapper
def show() -> None:
    """Show the current configuration."""
    config = get_config_service().config
    console.print_json(config.model_dump_json())


@app.command("get")
@command_wrapper
def get(key: str = typer.Argument(..., help="Dot-separated key, e.g. api.endpoint")) -> None:
    """Print one configuration value."""
    value = get_config_service().get(key)
    if value is None:
        raise KeyError(f"Unknown config key: {key}")
    typer.echo(value)


@app.command("set")
@command_wrapper
def set_value(
    key: str = typer.Argument(..., help="Dot-separated key, e.g. crypto.kdf_iterations"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Set a configuration value.

    Changing crypto.kdf_iterations makes packages sealed under the old value
    unreadable.
    """
    get_config_service().set(key, value)
    format_success(f"{key} updated")
