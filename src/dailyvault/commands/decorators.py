"""Decorators and shared helpers for command functions."""

import asyncio
import functools
import inspect
import os
import time
import traceback
from collections.abc import Callable

import httpx
import typer

from dailyvault.crypto.exceptions import DecryptionError, MissingSecretError
from dailyvault.services.config_service import get_config_service
from dailyvault.services.vault_service import resolve_stored_secret
from dailyvault.utils import exit_codes
from dailyvault.utils.logger import get_logger
from dailyvault.utils.ui.formatters import format_error


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = exit_codes.ERROR_GENERAL):
        super().__init__(message)
        self.exit_code = exit_code


SECRET_ENVVAR = "DAILYVAULT_SECRET"

SECRET_OPTION = typer.Option(
    None,
    "--secret",
    envvar=SECRET_ENVVAR,
    help="Secret to use instead of the signed-in identity",
    show_default=False,
)


def resolve_secret(explicit: str | None) -> str:
    """Use ``--secret``/``DAILYVAULT_SECRET`` if given, else the stored identity.

    A secret that is given but empty is an error, never a fallback.
    """
    # Click drops empty environment values before they reach the option
    if explicit is None and os.environ.get(SECRET_ENVVAR) == "":
        explicit = ""
    if explicit is not None:
        if not explicit:
            raise MissingSecretError("Empty secret given")
        return explicit
    return resolve_stored_secret(get_config_service())


def _fail(logger, cmd: str, start: float, message: str, exit_code: int) -> typer.Exit:
    logger.error(
        "command failed: %s (%.3fs) - %s",
        cmd,
        time.monotonic() - start,
        exit_codes.get_exit_code_name(exit_code),
    )
    format_error(message)
    return typer.Exit(code=exit_code)


def command_wrapper(func: Callable) -> Callable:
    """Run a (possibly async) command and map known errors to exit codes."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger()
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            if inspect.iscoroutinefunction(func):
                result = asyncio.run(func(*args, **kwargs))
            else:
                result = func(*args, **kwargs)

            logger.info("command completed: %s (%.3fs)", cmd, time.monotonic() - start)
            return result

        except typer.Exit:
            raise

        except MissingSecretError as e:
            raise _fail(
                logger,
                cmd,
                start,
                f"{e}. Log in or pass --secret.",
                exit_codes.ERROR_MISSING_SECRET,
            ) from e

        except DecryptionError as e:
            # Same message for every cause; see crypto.codec.
            raise _fail(logger, cmd, start, str(e), exit_codes.ERROR_DECRYPTION) from e

        except httpx.HTTPStatusError as e:
            raise _fail(
                logger,
                cmd,
                start,
                f"API returned {e.response.status_code} for {e.request.url.path}",
                exit_codes.ERROR_NETWORK,
            ) from e

        except httpx.RequestError as e:
            raise _fail(
                logger,
                cmd,
                start,
                f"Could not reach the API: {type(e).__name__}",
                exit_codes.ERROR_NETWORK,
            ) from e

        except (ValueError, KeyError) as e:
            raise _fail(logger, cmd, start, str(e), exit_codes.ERROR_INVALID_ARGS) from e

        except AppError as e:
            raise _fail(logger, cmd, start, str(e), e.exit_code) from e

        except Exception as e:
            logger.error(
                "command crashed: %s (%.3fs)\n%s",
                cmd,
                time.monotonic() - start,
                traceback.format_exc(),
            )
            format_error(f"An unexpected error occurred: {type(e).__name__}")
            raise typer.Exit(code=exit_codes.ERROR_GENERAL) from e

    return wrapper
