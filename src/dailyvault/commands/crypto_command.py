"""Seal, open and inspect sealed packages from the command line."""

import json

import typer
from rich.table import Table

from dailyvault.commands.decorators import (
    SECRET_OPTION,
    AppError,
    command_wrapper,
    resolve_secret,
)
from dailyvault.crypto.codec import SealedBoxCodec
from dailyvault.crypto.exceptions import MalformedPackageError
from dailyvault.crypto.package import SealedPackage
from dailyvault.services.config_service import get_config_service
from dailyvault.utils import exit_codes
from dailyvault.utils.ui.console import get_console

app = typer.Typer(help="Seal and open encrypted values")
console = get_console()


def get_codec() -> SealedBoxCodec:
    """Codec using the configured iteration count."""
    return SealedBoxCodec(get_config_service().config.crypto.kdf_iterations)


@app.command("seal")
@command_wrapper
def seal_command(
    value: str = typer.Argument(..., help="Value to seal"),
    as_json: bool = typer.Option(
        False, "--json", help="Parse VALUE as JSON before sealing"
    ),
    text: bool = typer.Option(
        False, "--text", help="Seal the raw string without a JSON layer"
    ),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Seal a value and print the base64 package."""
    if as_json and text:
        raise ValueError("--json and --text are mutually exclusive")

    codec = get_codec()
    key_secret = resolve_secret(secret)
    if text:
        package = codec.seal_text(key_secret, value)
    else:
        payload = json.loads(value) if as_json else value
        package = codec.seal(key_secret, payload)
    typer.echo(package)


@app.command("open")
@command_wrapper
def open_command(
    package: str = typer.Argument(..., help="Base64 package to open"),
    text: bool = typer.Option(
        False, "--text", help="Package holds a raw string (sealed with --text)"
    ),
    secret: str | None = SECRET_OPTION,
) -> None:
    """Open a sealed package and print its value."""
    codec = get_codec()
    key_secret = resolve_secret(secret)
    if text:
        typer.echo(codec.open_text(key_secret, package))
        return

    value = codec.open(key_secret, package)
    if isinstance(value, str):
        typer.echo(value)
    else:
        typer.echo(json.dumps(value, ensure_ascii=False, indent=2))


@app.command("inspect")
@command_wrapper
def inspect_command(
    package: str = typer.Argument(..., help="Base64 package to inspect"),
) -> None:
    """Show the layout of a package without decrypting it."""
    try:
        sealed = SealedPackage.from_string(package)
    except MalformedPackageError as e:
        raise AppError("Not a valid sealed package", exit_codes.ERROR_INVALID_ARGS) from e

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Part")
    table.add_column("Bytes", justify="right")
    table.add_row("salt", str(len(sealed.salt)))
    table.add_row("iv", str(len(sealed.iv)))
    table.add_row("ciphertext + tag", str(len(sealed.ciphertext)))
    table.add_row("[bold]total[/bold]", str(sealed.size))
    console.print(table)
