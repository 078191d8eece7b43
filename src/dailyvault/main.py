"""Main entry point for the DailyVault CLI."""

import typer

from dailyvault import __version__
from dailyvault.commands import (
    categories_command,
    config_command,
    crypto_command,
    diary_command,
    tasks_command,
)
from dailyvault.commands.decorators import command_wrapper
from dailyvault.services.config_service import get_config_service
from dailyvault.services.identity import identity_from_token
from dailyvault.utils.ui.console import get_console
from dailyvault.utils.ui.formatters import format_success

app = typer.Typer(
    name="dailyvault",
    help="End-to-end encrypted tasks and diary for DailyVault",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(crypto_command.app, name="crypto", help="Seal and open encrypted values")
app.add_typer(tasks_command.app, name="tasks", help="Task management commands")
app.add_typer(diary_command.app, name="diary", help="Diary commands")
app.add_typer(categories_command.app, name="categories", help="Category management commands")
app.add_typer(config_command.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]DailyVault CLI[/bold] version [cyan]{__version__}[/cyan]")


@app.command()
@command_wrapper
def login(token: str = typer.Argument(..., help="Access token issued by the server")) -> None:
    """Store an access token. Its user id becomes the encryption secret."""
    identity = identity_from_token(token)
    if identity is None or not identity.user_id:
        raise ValueError("Token does not carry a user id")
    get_config_service().save_credentials(token)
    format_success(f"Logged in as {identity.email or identity.user_id}")


@app.command()
@command_wrapper
def logout() -> None:
    """Forget the stored access token."""
    get_config_service().clear_credentials()
    format_success("Logged out")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
